"""
Tests for DOM settle detection.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from llm_web_extract.dom.settle import DomSettleWaiter
from llm_web_extract.exceptions import DomNotSettledError


def make_page(settled=True):
    page = MagicMock()
    page.wait_for_load_state = AsyncMock()
    page.evaluate = AsyncMock(return_value=settled)
    return page


class TestDomSettleWaiter:
    """Test waiting for a quiet DOM."""

    @pytest.mark.asyncio
    async def test_settled(self):
        page = make_page(settled=True)
        waiter = DomSettleWaiter(page, default_timeout_ms=5000, quiet_ms=200)

        await waiter.wait()

        page.wait_for_load_state.assert_awaited_once_with("domcontentloaded", timeout=5000)
        assert page.evaluate.call_args.args[1] == {"quietMs": 200, "timeoutMs": 5000}

    @pytest.mark.asyncio
    async def test_explicit_timeout_wins(self):
        page = make_page(settled=True)
        waiter = DomSettleWaiter(page, default_timeout_ms=5000)

        await waiter.wait(1000)

        assert page.evaluate.call_args.args[1]["timeoutMs"] == 1000

    @pytest.mark.asyncio
    async def test_not_settled(self):
        """A page that keeps mutating raises with the bound attached."""
        waiter = DomSettleWaiter(make_page(settled=False), default_timeout_ms=5000)

        with pytest.raises(DomNotSettledError) as exc_info:
            await waiter.wait()

        assert exc_info.value.timeout_ms == 5000

    @pytest.mark.asyncio
    async def test_load_state_timeout(self):
        page = make_page()
        page.wait_for_load_state = AsyncMock(side_effect=PlaywrightTimeoutError("Timeout 5000ms exceeded"))
        waiter = DomSettleWaiter(page)

        with pytest.raises(DomNotSettledError):
            await waiter.wait(5000)

        page.evaluate.assert_not_called()

    @pytest.mark.asyncio
    async def test_navigation_during_check(self):
        page = make_page()
        page.evaluate = AsyncMock(side_effect=PlaywrightError("Execution context was destroyed"))
        waiter = DomSettleWaiter(page)

        with pytest.raises(DomNotSettledError):
            await waiter.wait(5000)

    @pytest.mark.asyncio
    async def test_zero_timeout_skips_wait(self):
        """A bound of 0 disables settling instead of failing on every call."""
        page = make_page(settled=False)
        waiter = DomSettleWaiter(page, default_timeout_ms=0)

        await waiter.wait()
        await DomSettleWaiter(make_page(settled=False)).wait(0)

        page.wait_for_load_state.assert_not_called()
        page.evaluate.assert_not_called()
