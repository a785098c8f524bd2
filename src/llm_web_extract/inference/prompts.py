"""
Prompt Templates - LLM prompts for extraction and observation.

Design principles:
1. Be explicit and structured
2. Request JSON output
3. Keep token count manageable
"""

import json
from typing import Any, Dict, Tuple

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_OBSERVE_INSTRUCTION = (
    "Find elements that can be used for any future actions in the page. "
    "These may be navigation links, related pages, section/subsection links, "
    "buttons, or other interactive elements. Be comprehensive: if there are "
    "multiple elements that may be relevant for future actions, return all of them."
)

VISION_PLACEHOLDER = "n/a. use the image to find the elements."

# =============================================================================
# EXTRACTION PROMPT
# =============================================================================

EXTRACT_SYSTEM = """You are extracting content on behalf of a user.

You will be given:
1. An instruction
2. A list of DOM elements to extract from (one chunk of the page)
3. The content extracted so far from earlier chunks, and a progress note

Print the exact text from the DOM elements with all symbols, characters, and endlines as is.
Print null or an empty string if no new information is found.

Merge what you find with the content extracted so far and return the complete,
updated result. Keep earlier values unless this chunk corrects them.

OUTPUT FORMAT (JSON object):
- every field of the target schema
- "metadata": {{"progress": "<what has been extracted so far>", "completed": <true|false>}}

Set "completed" to true only when the instruction has been fully satisfied.
If you are on the last chunk, set "completed" to true.

Target schema:
{schema}"""

EXTRACT_USER = """Instruction: {instruction}

Progress so far: {progress}

Previously extracted content:
{previous_content}

DOM chunk {chunk_number} of {chunks_total}:
{dom_elements}

Output ONLY valid JSON, no explanation."""

# =============================================================================
# OBSERVATION PROMPT
# =============================================================================

OBSERVE_SYSTEM = """You are helping the user automate the browser by finding elements based on what the user wants to observe in the page.

You will be given:
1. An instruction of elements to observe
2. A numbered list of possible elements or an annotated image of the page

Return an array of elements that match the instruction. Use the number shown
in front of each element (or drawn on the image) as its element_id.

OUTPUT FORMAT (JSON object):
```json
{
  "elements": [
    {"element_id": "12", "description": "Search button in the page header"}
  ]
}
```"""

OBSERVE_USER = """Instruction: {instruction}

DOM: {dom_elements}

Output ONLY valid JSON, no explanation."""


class PromptBuilder:
    """Fill the prompt templates."""
    
    def build_extract(
        self,
        instruction: str,
        progress: str,
        previous_content: Dict[str, Any],
        dom_elements: str,
        schema: Dict[str, Any],
        chunks_seen: int,
        chunks_total: int,
    ) -> Tuple[str, str]:
        system = EXTRACT_SYSTEM.format(schema=json.dumps(schema, indent=2))
        user = EXTRACT_USER.format(
            instruction=instruction,
            progress=progress or "(none)",
            previous_content=json.dumps(previous_content, indent=2, default=str),
            chunk_number=chunks_seen + 1,
            chunks_total=chunks_total,
            dom_elements=dom_elements,
        )
        return system, user
    
    def build_observe(self, instruction: str, dom_elements: str) -> Tuple[str, str]:
        return OBSERVE_SYSTEM, OBSERVE_USER.format(
            instruction=instruction,
            dom_elements=dom_elements,
        )
