from typing import Protocol, Optional, Callable

# Receives the error text and the page URL it was raised on.
PageErrorListener = Callable[[str, str], None]


class AutomationEngine(Protocol):
    default_timeout_ms: int

    def start(self, headless: bool = True, user_data_dir: Optional[str] = None) -> None:
        ...

    def stop(self) -> None:
        ...

    def goto(self, url: str) -> None:
        ...

    def type(self, selector: str, value: str, clear: bool = True) -> None:
        ...

    def click(self, selector: str) -> None:
        ...

    def click_text(self, selector: str, text: str) -> None:
        ...

    def wait_for(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        ...

    def count(self, selector: str) -> int:
        ...

    def exists(self, selector: str) -> bool:
        ...

    def add_page_error_listener(self, listener: PageErrorListener) -> None:
        ...

    def remove_page_error_listener(self, listener: PageErrorListener) -> None:
        ...
