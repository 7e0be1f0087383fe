# step_workflows/checkout.py
from __future__ import annotations

from ..dsl import CHECKOUT_STEP_NAME, sh, uses
from ..model import INERT, Step
from . import actions


def checkout_repo() -> Step:
    return uses(CHECKOUT_STEP_NAME, actions.CHECKOUT)


def checkout_repo_at_pr() -> Step:
    """Checkout pinned to the PR head commit, for dispatched runs."""
    return uses(CHECKOUT_STEP_NAME, actions.CHECKOUT, with_={"ref": "${{ env.PR_COMMIT_SHA }}"})


def checkout_scripts_repo() -> Step:
    return uses(
        "Checkout Scripts Repo",
        actions.CHECKOUT,
        with_={"path": "ci-scripts", "repository": "pulumi/scripts"},
    )


def checkout_tags(enabled: bool = True) -> Step:
    """Unshallow the clone so version tags are available to pulumictl."""
    if not enabled:
        return INERT
    return sh("Unshallow clone for tags", "git fetch --prune --unshallow --tags")
