# step_workflows/lint.py
from __future__ import annotations

from ..dsl import uses
from ..model import Step
from . import actions


def golangci_lint(timeout: str, *, config: str = "../.golangci.yml", cwd: str = "provider") -> Step:
    """Run golangci-lint against the provider module."""
    step = uses(
        "golangci-lint provider pkg",
        actions.GOLANGCI_LINT,
        with_={
            "version": "${{ env.GOLANGCI_LINT_VERSION }}",
            "args": f"-c {config} --timeout {timeout}",
            "working-directory": cwd,
        },
    )
    return step
