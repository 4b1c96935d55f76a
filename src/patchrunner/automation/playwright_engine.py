import logging
from contextlib import contextmanager
from typing import Optional, Dict, Callable

from playwright.sync_api import sync_playwright, Page, Browser, BrowserContext
from playwright.sync_api import Error as PlaywrightError

from .engine import PageErrorListener
from .errors import UIInteractionError

logger = logging.getLogger(__name__)


@contextmanager
def _translate_errors(action: str):
    try:
        yield
    except PlaywrightError as e:
        raise UIInteractionError(f"{action} failed: {e.message}") from e


class PlaywrightEngine:
    def __init__(self, default_timeout_ms: int = 4000):
        self.default_timeout_ms = default_timeout_ms
        self._pw = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._listeners: Dict[PageErrorListener, Callable] = {}

    def start(self, headless: bool = True, user_data_dir: Optional[str] = None) -> None:
        self._pw = sync_playwright().start()
        launch_args = {"headless": headless}
        if user_data_dir:
            self._context = self._pw.chromium.launch_persistent_context(user_data_dir, **launch_args)
            pages = self._context.pages
            self._page = pages[0] if pages else self._context.new_page()
        else:
            self._browser = self._pw.chromium.launch(**launch_args)
            self._context = self._browser.new_context()
            self._page = self._context.new_page()
        self._context.set_default_timeout(self.default_timeout_ms)
        logger.debug("Playwright chromium started (headless=%s)", headless)

    def stop(self) -> None:
        if self._page:
            for handler in self._listeners.values():
                self._page.remove_listener("pageerror", handler)
        self._listeners.clear()
        if self._context:
            self._context.close()
        if self._browser:
            self._browser.close()
        if self._pw:
            self._pw.stop()
        self._page = None
        self._context = None
        self._browser = None
        self._pw = None

    def goto(self, url: str) -> None:
        assert self._page is not None
        logger.debug("goto %s", url)
        with _translate_errors(f"Navigation to {url}"):
            self._page.goto(url, wait_until="load")

    def type(self, selector: str, value: str, clear: bool = True) -> None:
        assert self._page is not None
        with _translate_errors(f"Typing into {selector}"):
            locator = self._page.locator(selector)
            if clear:
                locator.fill("")
            locator.press_sequentially(value)

    def click(self, selector: str) -> None:
        assert self._page is not None
        with _translate_errors(f"Click on {selector}"):
            self._page.click(selector)

    def click_text(self, selector: str, text: str) -> None:
        assert self._page is not None
        with _translate_errors(f"Click on {selector} containing '{text}'"):
            self._page.locator(selector, has_text=text).first.click()

    def wait_for(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        assert self._page is not None
        timeout = self.default_timeout_ms if timeout_ms is None else timeout_ms
        with _translate_errors(f"Waiting for {selector}"):
            self._page.wait_for_selector(selector, timeout=timeout)

    def count(self, selector: str) -> int:
        assert self._page is not None
        with _translate_errors(f"Counting {selector}"):
            return self._page.locator(selector).count()

    def exists(self, selector: str) -> bool:
        return self.count(selector) > 0

    def add_page_error_listener(self, listener: PageErrorListener) -> None:
        assert self._page is not None
        page = self._page

        def handler(error) -> None:
            listener(str(error), page.url)

        self._listeners[listener] = handler
        page.on("pageerror", handler)

    def remove_page_error_listener(self, listener: PageErrorListener) -> None:
        handler = self._listeners.pop(listener, None)
        if handler and self._page:
            self._page.remove_listener("pageerror", handler)
