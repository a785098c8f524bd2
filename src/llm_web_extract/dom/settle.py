"""
DOM settle detection.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from llm_web_extract.dom.scripts import WAIT_FOR_SETTLED_JS
from llm_web_extract.exceptions import DomNotSettledError
from llm_web_extract.interfaces.dom import IDomSettleWaiter

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)


class DomSettleWaiter(IDomSettleWaiter):
    """
    Wait until the page has loaded and stopped mutating.
    
    The page counts as settled once no DOM mutation has been observed for
    ``quiet_ms``. Exceeding the timeout raises DomNotSettledError. A timeout
    of 0 skips the wait entirely.
    """
    
    def __init__(self, page: "Page", default_timeout_ms: int = 30000, quiet_ms: int = 500):
        self._page = page
        self._default_timeout_ms = default_timeout_ms
        self._quiet_ms = quiet_ms
    
    async def wait(self, timeout_ms: Optional[int] = None) -> None:
        timeout_ms = self._default_timeout_ms if timeout_ms is None else timeout_ms
        if timeout_ms <= 0:
            logger.debug("Settle wait disabled")
            return
        
        try:
            await asyncio.wait_for(self._wait(timeout_ms), timeout=timeout_ms / 1000 + 1)
        except (asyncio.TimeoutError, PlaywrightTimeoutError) as e:
            raise DomNotSettledError(
                f"DOM did not settle within {timeout_ms}ms", timeout_ms=timeout_ms
            ) from e
    
    async def _wait(self, timeout_ms: int) -> None:
        await self._page.wait_for_load_state("domcontentloaded", timeout=timeout_ms)
        try:
            settled = await self._page.evaluate(
                WAIT_FOR_SETTLED_JS,
                {"quietMs": self._quiet_ms, "timeoutMs": timeout_ms},
            )
        except PlaywrightError as e:
            # Navigation destroyed the execution context
            logger.debug(f"Settle check interrupted: {e}")
            raise DomNotSettledError(
                "Page navigated while waiting for the DOM to settle", timeout_ms=timeout_ms
            ) from e
        
        if not settled:
            raise DomNotSettledError(
                f"DOM did not settle within {timeout_ms}ms", timeout_ms=timeout_ms
            )
        logger.debug("DOM settled")
