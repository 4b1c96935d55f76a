"""Precondition checks for externally supplied configuration values."""
from typing import Dict, Mapping, Optional

from .errors import MissingConfigurationError

# Human-readable names used in missing-value messages.
DESCRIPTIONS: Dict[str, str] = {
    "patchtester_url": "Patch Tester download URL",
    "token": "GitHub token",
}


class Environment:
    """Read-only view over the configuration values of one run."""

    def __init__(self, values: Optional[Mapping[str, Optional[str]]] = None,
                 descriptions: Optional[Mapping[str, str]] = None):
        self._values: Dict[str, str] = {k: v for k, v in (values or {}).items() if v is not None}
        self._descriptions = dict(DESCRIPTIONS)
        if descriptions:
            self._descriptions.update(descriptions)

    def get(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        if value is None or not value.strip():
            return None
        return value.strip()

    def require(self, key: str) -> str:
        """Return the value for ``key`` or raise MissingConfigurationError."""
        value = self.get(key)
        if value is None:
            raise MissingConfigurationError(key, self._descriptions.get(key))
        return value
