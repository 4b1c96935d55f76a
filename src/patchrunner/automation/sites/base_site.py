from typing import Protocol


class AdminSite(Protocol):
    """Reusable admin commands a workflow step can rely on."""

    def ensure_authenticated(self) -> None:
        ...

    def install_extension_from_url(self, url: str) -> None:
        ...

    def click_toolbar_button(self, label: str) -> None:
        ...
