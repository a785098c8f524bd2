"""
In-page JavaScript used by the DOM chunk provider and settle waiter.
"""

DEBUG_STYLE_ID = "llm-extract-debug-style"
DEBUG_CLASS = "llm-extract-debug"

# Serialize the page. Chunks are viewport-height bands of the document.
# Element ids are indices into the document-order candidate list, so they
# stay stable for as long as the DOM does.
PROCESS_DOM_JS = """
(args) => {
    const chunksSeen = new Set(args.chunksSeen || []);
    const fullPage = !!args.fullPage;
    const debugClass = args.debugClass;
    const debugActive = !!document.getElementById(args.debugStyleId);

    const viewportHeight = window.innerHeight || document.documentElement.clientHeight || 1;
    const totalHeight = Math.max(
        document.documentElement.scrollHeight,
        document.body ? document.body.scrollHeight : 0,
        viewportHeight,
    );
    const chunkCount = Math.max(1, Math.ceil(totalHeight / viewportHeight));
    const chunks = Array.from({ length: chunkCount }, (_, i) => i);

    const INTERACTIVE_TAGS = new Set([
        'a', 'button', 'input', 'select', 'textarea', 'details', 'summary', 'option', 'label',
    ]);
    const INTERACTIVE_ROLES = new Set([
        'button', 'link', 'textbox', 'checkbox', 'radio', 'combobox', 'listbox',
        'menuitem', 'option', 'searchbox', 'slider', 'switch', 'tab', 'treeitem',
    ]);
    const SKIP_TAGS = new Set(['script', 'style', 'noscript', 'template', 'svg', 'head', 'meta']);
    const KEEP_ATTRS = ['id', 'name', 'type', 'placeholder', 'aria-label', 'role', 'href', 'value', 'title', 'alt'];

    function xpathOf(el) {
        const parts = [];
        while (el && el.nodeType === Node.ELEMENT_NODE) {
            let index = 1;
            let sibling = el.previousElementSibling;
            while (sibling) {
                if (sibling.tagName === el.tagName) index++;
                sibling = sibling.previousElementSibling;
            }
            parts.unshift(el.tagName.toLowerCase() + '[' + index + ']');
            el = el.parentElement;
        }
        return '/' + parts.join('/');
    }

    function isVisible(el) {
        const rect = el.getBoundingClientRect();
        const style = window.getComputedStyle(el);
        return rect.width > 0 && rect.height > 0 &&
            style.visibility !== 'hidden' && style.display !== 'none';
    }

    function isInteractive(el) {
        const tag = el.tagName.toLowerCase();
        const role = el.getAttribute('role');
        return INTERACTIVE_TAGS.has(tag) || (role && INTERACTIVE_ROLES.has(role)) ||
            el.hasAttribute('onclick') || el.hasAttribute('contenteditable');
    }

    function ownText(el) {
        let text = '';
        for (const node of el.childNodes) {
            if (node.nodeType === Node.TEXT_NODE) text += node.textContent;
        }
        return text.replace(/\\s+/g, ' ').trim();
    }

    function serialize(el, interactive) {
        const tag = el.tagName.toLowerCase();
        if (!interactive) return ownText(el);
        const attrs = [];
        for (const name of KEEP_ATTRS) {
            const value = el.getAttribute(name);
            if (value) attrs.push(name + '="' + value.substring(0, 100) + '"');
        }
        const text = (el.innerText || el.textContent || '').replace(/\\s+/g, ' ').trim().substring(0, 200);
        const open = attrs.length ? '<' + tag + ' ' + attrs.join(' ') + '>' : '<' + tag + '>';
        return open + text + '</' + tag + '>';
    }

    const candidates = [];
    const walker = document.createTreeWalker(document.body || document.documentElement, NodeFilter.SHOW_ELEMENT);
    let node = walker.currentNode;
    while (node) {
        const tag = node.tagName.toLowerCase();
        if (!SKIP_TAGS.has(tag) && isVisible(node)) {
            const interactive = isInteractive(node);
            if (interactive || ownText(node)) {
                const top = node.getBoundingClientRect().top + window.scrollY;
                const band = Math.min(chunkCount - 1, Math.max(0, Math.floor(top / viewportHeight)));
                candidates.push({ el: node, interactive, band });
            }
        }
        node = walker.nextNode();
    }

    let chunk = -1;
    if (!fullPage) {
        chunk = chunks.find((c) => !chunksSeen.has(c));
        if (chunk === undefined) chunk = -1;
    }

    const lines = [];
    const selectorMap = {};
    candidates.forEach((candidate, index) => {
        if (!fullPage && candidate.band !== chunk) return;
        const text = serialize(candidate.el, candidate.interactive);
        if (!text) return;
        const id = String(index);
        lines.push(id + ':' + text);
        selectorMap[id] = [xpathOf(candidate.el)];
        if (debugActive) candidate.el.classList.add(debugClass);
    });

    return { outputString: lines.join('\\n'), chunk, chunks, selectorMap };
}
"""

START_DEBUG_JS = """
(args) => {
    if (document.getElementById(args.styleId)) return;
    const style = document.createElement('style');
    style.id = args.styleId;
    style.textContent = '.' + args.debugClass + ' { outline: 2px dashed #FF6B6B !important; }';
    document.head.appendChild(style);
}
"""

CLEANUP_DEBUG_JS = """
(args) => {
    const style = document.getElementById(args.styleId);
    if (style) style.remove();
    document.querySelectorAll('.' + args.debugClass).forEach((el) => el.classList.remove(args.debugClass));
}
"""

# Resolves true once no mutation was seen for quietMs, false at timeoutMs.
WAIT_FOR_SETTLED_JS = """
(args) => new Promise((resolve) => {
    let done = false;
    let quietTimer = null;
    let deadline = null;
    const observer = new MutationObserver(() => {
        clearTimeout(quietTimer);
        quietTimer = setTimeout(() => finish(true), args.quietMs);
    });
    function finish(settled) {
        if (done) return;
        done = true;
        observer.disconnect();
        clearTimeout(quietTimer);
        clearTimeout(deadline);
        resolve(settled);
    }
    observer.observe(document.documentElement, {
        childList: true, subtree: true, attributes: true, characterData: true,
    });
    quietTimer = setTimeout(() => finish(true), args.quietMs);
    deadline = setTimeout(() => finish(false), args.timeoutMs);
})
"""

ANNOTATE_JS = """
(args) => {
    const container = document.createElement('div');
    container.id = args.containerId;
    container.style.cssText = 'position:absolute;top:0;left:0;pointer-events:none;z-index:2147483647;';
    for (const [id, xpaths] of Object.entries(args.selectorMap)) {
        const result = document.evaluate(xpaths[0], document, null, XPathResult.FIRST_ORDERED_NODE_TYPE, null);
        const el = result.singleNodeValue;
        if (!el || !el.getBoundingClientRect) continue;
        const rect = el.getBoundingClientRect();
        if (rect.width === 0 || rect.height === 0) continue;
        const top = rect.top + window.scrollY;
        const left = rect.left + window.scrollX;
        const box = document.createElement('div');
        box.style.cssText = 'position:absolute;border:2px solid #FF6B6B;' +
            'top:' + top + 'px;left:' + left + 'px;width:' + rect.width + 'px;height:' + rect.height + 'px;';
        const label = document.createElement('div');
        label.textContent = id;
        label.style.cssText = 'position:absolute;background:#FF6B6B;color:#fff;font:bold 11px monospace;' +
            'padding:0 3px;top:' + Math.max(0, top - 14) + 'px;left:' + left + 'px;';
        container.appendChild(box);
        container.appendChild(label);
    }
    document.body.appendChild(container);
    return container.childElementCount / 2;
}
"""

REMOVE_ANNOTATIONS_JS = """
(containerId) => {
    const container = document.getElementById(containerId);
    if (container) container.remove();
}
"""
