import logging
from typing import Dict

from ...core.config import WorkflowConfig
from ..engine import AutomationEngine
from ..errors import AuthenticationError, UIInteractionError

logger = logging.getLogger("patchrunner")

LOGIN_USERNAME = "#mod-login-username"
LOGIN_PASSWORD = "#mod-login-password"
LOGIN_SUBMIT = "#btn-login-submit"
PAGE_TITLE = "h1.page-title"
ERROR_ALERT = "#system-message-container joomla-alert[type='danger'], #system-message-container .alert-danger"
SUCCESS_ALERT = "#system-message-container joomla-alert[type='success'], #system-message-container .alert-success"

INSTALL_VIEW = "index.php?option=com_installer&view=install"
INSTALL_URL_TAB = "button[aria-controls='url']"
INSTALL_URL_INPUT = "#install_url"
INSTALL_URL_BUTTON = "#installbutton_url"

# Toolbar labels with a stable id; anything else is matched by its text.
TOOLBAR_BUTTONS: Dict[str, str] = {
    "new": "#toolbar-new button",
    "edit": "#toolbar-edit button",
    "save": "#toolbar-apply button",
    "save & close": "#toolbar-save button",
    "save & new": "#toolbar-save-new button",
    "cancel": "#toolbar-cancel button",
    "close": "#toolbar-cancel button",
    "delete": "#toolbar-delete button",
    "options": "#toolbar-options button",
}
TOOLBAR = "#toolbar button"


class JoomlaAdmin:
    """Joomla administrator commands: login, URL install, toolbar buttons."""

    def __init__(self, engine: AutomationEngine, config: WorkflowConfig):
        self.engine = engine
        self.config = config

    def ensure_authenticated(self) -> None:
        """Log in as the configured administrator unless already logged in.

        Safe to call repeatedly; with a live session the login form is not
        rendered and nothing is submitted.
        """
        self.engine.goto(self.config.admin_url("index.php"))
        if not self.engine.exists(LOGIN_USERNAME):
            logger.debug("Administrator session still valid")
            return

        username = self.config.admin_username
        if not self.config.admin_password:
            raise AuthenticationError(f"No administrator password configured for '{username}'")

        logger.info("Logging in to administrator as '%s'", username)
        self.engine.type(LOGIN_USERNAME, username)
        self.engine.type(LOGIN_PASSWORD, self.config.admin_password)
        self.engine.click(LOGIN_SUBMIT)
        try:
            self.engine.wait_for(PAGE_TITLE)
        except UIInteractionError as e:
            if self.engine.exists(ERROR_ALERT) or self.engine.exists(LOGIN_USERNAME):
                raise AuthenticationError(f"Administrator login as '{username}' was rejected") from e
            raise
        if self.engine.exists(LOGIN_USERNAME):
            raise AuthenticationError(f"Administrator login as '{username}' was rejected")

    def install_extension_from_url(self, url: str) -> None:
        logger.info("Installing extension from %s", url)
        self.engine.goto(self.config.admin_url(INSTALL_VIEW))
        self.engine.click(INSTALL_URL_TAB)
        self.engine.type(INSTALL_URL_INPUT, url)
        self.engine.click(INSTALL_URL_BUTTON)
        # Download and unpack happen server-side before the page reloads.
        try:
            self.engine.wait_for(SUCCESS_ALERT, timeout_ms=self.config.sync_timeout_ms)
        except UIInteractionError as e:
            if self.engine.exists(ERROR_ALERT):
                raise UIInteractionError(f"Installation from {url} reported an error") from e
            raise

    def click_toolbar_button(self, label: str) -> None:
        selector = TOOLBAR_BUTTONS.get(label.lower())
        if selector and self.engine.exists(selector):
            self.engine.click(selector)
        else:
            self.engine.click_text(TOOLBAR, label)
