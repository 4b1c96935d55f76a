"""The Patch Tester setup workflow: install, set GitHub token, fetch data."""
import logging
from typing import List

from .steps import Step, StepContext, CompletionCheck

logger = logging.getLogger("patchrunner")

PULLS_VIEW = "index.php?option=com_patchtester&view=pulls"
OPTIONS_TOGGLE = "#toolbar-options"
GITHUB_AUTH_LABEL = "GitHub Authentication"
TOKEN_FIELD = "#jform_gh_token"
SYNC_BUTTON = "button.button-sync.btn.btn-primary"
RESULT_ROWS = "tr"


def install_component(ctx: StepContext) -> None:
    ctx.site.install_extension_from_url(ctx.values["patchtester_url"])


def set_github_token(ctx: StepContext) -> None:
    ctx.engine.goto(ctx.config.admin_url(PULLS_VIEW))
    ctx.engine.click(OPTIONS_TOGGLE)
    ctx.engine.click_text("button", GITHUB_AUTH_LABEL)
    ctx.engine.type(TOKEN_FIELD, ctx.values["token"], clear=True)
    logger.info("GitHub token entered")
    ctx.site.click_toolbar_button("Save & Close")


def fetch_data(ctx: StepContext) -> None:
    ctx.engine.goto(ctx.config.admin_url(PULLS_VIEW))
    ctx.engine.click(SYNC_BUTTON)


def has_pull_rows(ctx: StepContext) -> bool:
    # Header row plus at least one pull request.
    return ctx.engine.count(RESULT_ROWS) > 1


def build_steps() -> List[Step]:
    return [
        Step(
            name="install component",
            action=install_component,
            requires=("patchtester_url",),
            description="Install Joomla! Patch Tester from its download URL",
        ),
        Step(
            name="set GitHub token",
            action=set_github_token,
            requires=("token",),
            description="Store the GitHub token in the component options",
        ),
        Step(
            name="fetch data",
            action=fetch_data,
            completion=CompletionCheck(
                description="pull request table has more than one row",
                predicate=has_pull_rows,
            ),
            description="Synchronise pull requests from GitHub",
        ),
    ]
