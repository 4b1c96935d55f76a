import logging
from contextlib import contextmanager
from typing import Optional, List

try:
    from selenium import webdriver
    from selenium.common.exceptions import WebDriverException
    from selenium.webdriver.common.by import By
    from selenium.webdriver.chrome.options import Options as ChromeOptions
    from selenium.webdriver.support import expected_conditions as EC
    from selenium.webdriver.support.ui import WebDriverWait
    SELENIUM_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    SELENIUM_AVAILABLE = False

from .engine import PageErrorListener
from .errors import UIInteractionError

logger = logging.getLogger(__name__)

# Collects uncaught page errors into a buffer that drain() empties.
_COLLECTOR_JS = """
if (!window.__patchrunnerHooked) {
  window.__patchrunnerHooked = true;
  window.__patchrunnerErrors = [];
  window.addEventListener('error', function (e) {
    window.__patchrunnerErrors.push(String(e.error || e.message));
  });
  window.addEventListener('unhandledrejection', function (e) {
    window.__patchrunnerErrors.push(String(e.reason));
  });
}
"""

_DRAIN_JS = """
var errors = window.__patchrunnerErrors || [];
window.__patchrunnerErrors = [];
return errors;
"""


@contextmanager
def _translate_errors(action: str):
    try:
        yield
    except WebDriverException as e:
        raise UIInteractionError(f"{action} failed: {e.msg or e.__class__.__name__}") from e


class SeleniumEngine:
    def __init__(self, default_timeout_ms: int = 4000):
        if not SELENIUM_AVAILABLE:
            raise RuntimeError("Selenium is not installed. Install with: pip install .[automation-selenium]")
        self.default_timeout_ms = default_timeout_ms
        self._driver: Optional[webdriver.Chrome] = None
        self._listeners: List[PageErrorListener] = []

    def start(self, headless: bool = True, user_data_dir: Optional[str] = None) -> None:
        options = ChromeOptions()
        if headless:
            options.add_argument("--headless=new")
        if user_data_dir:
            options.add_argument(f"--user-data-dir={user_data_dir}")
        self._driver = webdriver.Chrome(options=options)
        # Registered before any page script runs on every new document.
        self._driver.execute_cdp_cmd("Page.addScriptToEvaluateOnNewDocument", {"source": _COLLECTOR_JS})

    def stop(self) -> None:
        self._listeners.clear()
        if self._driver:
            self._driver.quit()
            self._driver = None

    def _wait(self, timeout_ms: Optional[int] = None) -> "WebDriverWait":
        timeout = self.default_timeout_ms if timeout_ms is None else timeout_ms
        return WebDriverWait(self._driver, timeout / 1000.0)

    def _drain_page_errors(self) -> None:
        if not self._listeners or self._driver is None:
            return
        try:
            errors = self._driver.execute_script(_DRAIN_JS) or []
            url = self._driver.current_url
        except WebDriverException:
            logger.debug("Could not read page errors", exc_info=True)
            return
        for message in errors:
            for listener in list(self._listeners):
                listener(message, url)

    def goto(self, url: str) -> None:
        assert self._driver is not None
        logger.debug("goto %s", url)
        # The collector buffer is reset by the next document.
        self._drain_page_errors()
        with _translate_errors(f"Navigation to {url}"):
            self._driver.get(url)
        self._drain_page_errors()

    def type(self, selector: str, value: str, clear: bool = True) -> None:
        assert self._driver is not None
        with _translate_errors(f"Typing into {selector}"):
            elem = self._wait().until(EC.element_to_be_clickable((By.CSS_SELECTOR, selector)))
            if clear:
                elem.clear()
            elem.send_keys(value)
        self._drain_page_errors()

    def click(self, selector: str) -> None:
        assert self._driver is not None
        with _translate_errors(f"Click on {selector}"):
            self._wait().until(EC.element_to_be_clickable((By.CSS_SELECTOR, selector))).click()
        self._drain_page_errors()

    def click_text(self, selector: str, text: str) -> None:
        assert self._driver is not None

        def find(driver):
            for elem in driver.find_elements(By.CSS_SELECTOR, selector):
                if text.lower() in (elem.text or "").lower() and elem.is_displayed():
                    return elem
            return False

        with _translate_errors(f"Click on {selector} containing '{text}'"):
            self._wait().until(find).click()
        self._drain_page_errors()

    def wait_for(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        assert self._driver is not None
        with _translate_errors(f"Waiting for {selector}"):
            self._wait(timeout_ms).until(EC.presence_of_element_located((By.CSS_SELECTOR, selector)))
        self._drain_page_errors()

    def count(self, selector: str) -> int:
        assert self._driver is not None
        with _translate_errors(f"Counting {selector}"):
            found = len(self._driver.find_elements(By.CSS_SELECTOR, selector))
        self._drain_page_errors()
        return found

    def exists(self, selector: str) -> bool:
        return self.count(selector) > 0

    def add_page_error_listener(self, listener: PageErrorListener) -> None:
        self._listeners.append(listener)

    def remove_page_error_listener(self, listener: PageErrorListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
