# step_workflows/github.py
from __future__ import annotations

from ..dsl import sh, uses
from ..model import Step
from . import actions

ACCEPTANCE_TESTS_COMMAND = "run-acceptance-tests"


def command_dispatch(provider: str) -> Step:
    return uses(
        "",
        actions.SLASH_COMMAND,
        with_={
            "token": "${{ secrets.PULUMI_BOT_TOKEN }}",
            "reaction-token": "${{ secrets.GITHUB_TOKEN }}",
            "commands": ACCEPTANCE_TESTS_COMMAND,
            "permission": "write",
            "issue-type": "pull-request",
            "repository": f"pulumi/pulumi-{provider}",
        },
    )


def comment_pr_with_slash_command() -> Step:
    return uses(
        "Comment PR",
        actions.PR_COMMENT,
        with_={
            "message": (
                "PR is now waiting for a maintainer to run the acceptance tests.\n"
                f"**Note for the maintainer:** To run the acceptance tests, please comment */{ACCEPTANCE_TESTS_COMMAND}* on the PR\n"
            ),
            "GITHUB_TOKEN": "${{ secrets.GITHUB_TOKEN }}",
        },
    )


def create_comments_url() -> Step:
    return sh(
        "Create URL to the run output",
        'echo "run-url=https://github.com/$GITHUB_REPOSITORY/actions/runs/$GITHUB_RUN_ID" >> "$GITHUB_OUTPUT"',
        id="vars",
    )


def update_pr_with_results() -> Step:
    return uses(
        "Update with Result",
        actions.CREATE_OR_UPDATE_COMMENT,
        with_={
            "token": "${{ secrets.PULUMI_BOT_TOKEN }}",
            "repository": "${{ github.event.client_payload.github.payload.repository.full_name }}",
            "issue-number": "${{ github.event.client_payload.github.payload.issue.number }}",
            "body": "Please view the PR build: ${{ steps.vars.outputs.run-url }}",
        },
    )


def echo_success() -> Step:
    return sh("Is workflow a success", "echo yes")


def notify_slack(title: str) -> Step:
    return uses(
        "Notify Slack",
        actions.NOTIFY_SLACK,
        if_="failure() && github.event_name == 'push'",
        with_={
            "author_name": title,
            "fields": "repo,commit,author,action",
            "status": "${{ job.status }}",
        },
    )


def remove_old_artifacts() -> Step:
    return uses(
        "Remove old artifacts",
        actions.REMOVE_ARTIFACTS,
        with_={"age": "1 month", "skip-tags": True},
    )
