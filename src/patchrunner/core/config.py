from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

ENGINES = ("playwright", "selenium")


@dataclass
class WorkflowConfig:
    """Settings for one workflow run."""
    base_url: str = "http://localhost/"
    admin_username: str = "ci-admin"
    admin_password: str = ""
    default_timeout_ms: int = 4000
    sync_timeout_factor: int = 10
    poll_interval_ms: int = 250
    continue_on_step_failure: bool = True
    headless: bool = True
    engine: str = "playwright"
    user_data_dir: Optional[str] = None

    def __post_init__(self):
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        if self.default_timeout_ms <= 0:
            raise ValueError("default_timeout_ms must be positive")
        if self.sync_timeout_factor < 1:
            raise ValueError("sync_timeout_factor must be at least 1")
        if self.poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        if self.engine not in ENGINES:
            raise ValueError(f"Unknown engine '{self.engine}', expected one of {', '.join(ENGINES)}")

    @property
    def sync_timeout_ms(self) -> int:
        return self.default_timeout_ms * self.sync_timeout_factor

    def admin_url(self, path: str = "") -> str:
        """Absolute URL below the site's ``administrator/`` entry point."""
        return urljoin(self.base_url, "administrator/" + path.lstrip("/"))
