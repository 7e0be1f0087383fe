# workflows.py
# Workflow assemblers: one function per generated GitHub Actions file.
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from . import jobs
from .config import Options
from .dsl import JobBuilder, workflow
from .model import Workflow
from .step_workflows import checkout, github

ACCEPTANCE_TEST_BRANCHES = ["master", "main"]
PR_COMMIT_SHA_FROM_DISPATCH = "${{ github.event.client_payload.pull_request.head.sha }}"
PR_COMMIT_SHA_FROM_PR = "${{ github.event.pull_request.head.sha }}"

SAME_REPO_CONDITION = "github.event.pull_request.head.repo.full_name == github.repository"
FORK_CONDITION = "github.event.pull_request.head.repo.full_name != github.repository"


# ---------------------------------------------------------------------
# Shared environment
# ---------------------------------------------------------------------

def merge_env(base: Mapping[str, Any], overrides: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Override-wins merge; neither input is modified."""
    merged = dict(base)
    merged.update(overrides or {})
    return merged


def base_env(opts: Options) -> Dict[str, Any]:
    return merge_env(
        {
            "GITHUB_TOKEN": "${{ secrets.PULUMI_BOT_TOKEN }}",
            "PROVIDER": opts.provider,
            "PULUMI_ACCESS_TOKEN": "${{ secrets.PULUMI_ACCESS_TOKEN }}",
            "PULUMI_LOCAL_NUGET": "${{ github.workspace }}/nuget",
            "NPM_TOKEN": "${{ secrets.NPM_TOKEN }}",
            "NODE_AUTH_TOKEN": "${{ secrets.NPM_TOKEN }}",
            "NUGET_PUBLISH_KEY": "${{ secrets.NUGET_PUBLISH_KEY }}",
            "PYPI_USERNAME": "__token__",
            "PYPI_PASSWORD": "${{ secrets.PYPI_API_TOKEN }}",
            "TRAVIS_OS_NAME": "linux",
            "SLACK_WEBHOOK_URL": "${{ secrets.SLACK_WEBHOOK_URL }}",
            "PULUMI_GO_DEP_ROOT": "${{ github.workspace }}/..",
            "PUBLISH_REPO_USERNAME": "${{ secrets.OSSRH_USERNAME }}",
            "PUBLISH_REPO_PASSWORD": "${{ secrets.OSSRH_PASSWORD }}",
            "SIGNING_KEY_ID": "${{ secrets.JAVA_SIGNING_KEY_ID }}",
            "SIGNING_KEY": "${{ secrets.JAVA_SIGNING_KEY }}",
            "SIGNING_PASSWORD": "${{ secrets.JAVA_SIGNING_PASSWORD }}",
            "GOVERSION": jobs.GO_VERSION,
            "NODEVERSION": jobs.NODE_VERSION,
            "PYTHONVERSION": jobs.PYTHON_VERSION,
            "DOTNETVERSION": jobs.DOTNET_VERSION,
            "JAVAVERSION": jobs.JAVA_VERSION,
            "GOLANGCI_LINT_VERSION": jobs.GOLANGCI_LINT_VERSION,
        },
        opts.env,
    )


# ---------------------------------------------------------------------
# Structural policy
# ---------------------------------------------------------------------

def sentinel_needs(lint: bool, test_infrastructure: bool) -> List[str]:
    """Jobs the sentinel gate waits on: test, then lint, then cluster teardown."""
    needs = [jobs.TEST]
    if lint:
        needs.append(jobs.LINT)
    if test_infrastructure:
        needs.append(jobs.TEARDOWN_CLUSTER)
    return needs


def apply_test_infrastructure(
    builders: List[JobBuilder],
    opts: Options,
    *,
    dispatch: bool = False,
) -> List[JobBuilder]:
    """
    Final patch: add the cluster provision/teardown pair for providers that
    test against dedicated infrastructure. Returns a new list.
    """
    if not opts.test_infrastructure:
        return list(builders)
    teardown = jobs.teardown_cluster_job(opts).for_dispatch(dispatch, guard=False)
    if not dispatch:
        # push-triggered runs have no pull_request payload to match on
        teardown.with_condition("${{ always() }}")
    return [
        *builders,
        jobs.build_test_cluster_job(opts).for_dispatch(dispatch),
        teardown,
    ]


def _lint(opts: Options, *, dispatch: bool = False) -> List[JobBuilder]:
    if not opts.lint:
        return []
    return [jobs.lint_job(opts).for_dispatch(dispatch)]


# ---------------------------------------------------------------------
# Workflows
# ---------------------------------------------------------------------

def command_dispatch_workflow(name: str, opts: Options) -> Workflow:
    """Turns `/run-acceptance-tests` PR comments into repository_dispatch events."""
    dispatcher = (
        jobs.empty_job("command-dispatch-for-testing")
        .with_condition("${{ github.event.issue.pull_request }}")
        .with_step(checkout.checkout_repo(), github.command_dispatch(opts.provider))
    )
    return workflow(
        name,
        {"issue_comment": {"types": ["created", "edited"]}},
        dispatcher,
        env=base_env(opts),
    )


def pull_request_workflow(name: str, opts: Options) -> Workflow:
    """
    Runs on pull_request_target.

    Fork PRs only get a comment asking a maintainer to dispatch the
    acceptance tests; same-repository PRs build and test the PR head commit.
    """
    comment = (
        jobs.empty_job("comment-on-pr")
        .with_condition(FORK_CONDITION)
        .with_step(checkout.checkout_repo(), github.comment_pr_with_slash_command())
    )
    pipeline = [
        jobs.prerequisites_job(opts).for_dispatch(True).with_condition(SAME_REPO_CONDITION),
        jobs.build_sdks_job(opts, False).for_dispatch(True).with_condition(SAME_REPO_CONDITION),
        jobs.test_job(opts).for_dispatch(True).with_condition(SAME_REPO_CONDITION),
    ]
    return workflow(
        name,
        {"pull_request_target": {}},
        comment,
        *apply_test_infrastructure(pipeline, opts, dispatch=True),
        env=merge_env(base_env(opts), {"PR_COMMIT_SHA": PR_COMMIT_SHA_FROM_PR}),
    )


def run_acceptance_tests_workflow(name: str, opts: Options) -> Workflow:
    notify = (
        jobs.empty_job("comment-notification")
        .with_condition("github.event_name == 'repository_dispatch'")
        .with_step(github.create_comments_url(), github.update_pr_with_results())
    )
    sentinel = (
        jobs.empty_job("sentinel")
        .with_condition(
            "github.event_name == 'repository_dispatch' || "
            "github.event.pull_request.head.repo.full_name == github.repository"
        )
        .with_step(github.echo_success())
        .depends_on(*sentinel_needs(opts.lint, opts.test_infrastructure))
    )
    pipeline = [
        notify,
        jobs.prerequisites_job(opts).for_dispatch(True),
        jobs.build_sdks_job(opts, False).for_dispatch(True),
        jobs.test_job(opts).for_dispatch(True),
        sentinel,
        *_lint(opts, dispatch=True),
    ]
    on = {
        "repository_dispatch": {"types": [f"{github.ACCEPTANCE_TESTS_COMMAND}-command"]},
        "pull_request": {
            "branches": [*ACCEPTANCE_TEST_BRANCHES, *opts.additional_branches],
            "paths-ignore": ["CHANGELOG.md"],
        },
        "workflow_dispatch": {},
    }
    return workflow(
        name,
        on,
        *apply_test_infrastructure(pipeline, opts, dispatch=True),
        env=merge_env(base_env(opts), {"PR_COMMIT_SHA": PR_COMMIT_SHA_FROM_DISPATCH}),
    )


def build_workflow(name: str, opts: Options) -> Workflow:
    on = {
        "push": {
            "branches": ["master", "main", "feature-**"],
            "paths-ignore": ["CHANGELOG.md"],
            "tags-ignore": ["v*", "sdk/*", "**"],
        },
        "workflow_dispatch": {},
    }
    pipeline = [
        jobs.prerequisites_job(opts),
        jobs.build_sdks_job(opts, False),
        jobs.test_job(opts),
        jobs.publish_prerelease_job(opts),
        jobs.publish_sdk_job(opts),
        jobs.publish_java_sdk_job(opts),
        *_lint(opts),
    ]
    return workflow(name, on, *apply_test_infrastructure(pipeline, opts), env=base_env(opts))


def prerelease_workflow(name: str, opts: Options) -> Workflow:
    pipeline = [
        jobs.prerequisites_job(opts),
        jobs.build_sdks_job(opts, True),
        jobs.test_job(opts),
        jobs.publish_prerelease_job(opts),
        jobs.publish_sdk_job(opts),
        jobs.publish_java_sdk_job(opts),
    ]
    return workflow(
        name,
        {"push": {"tags": ["v*.*.*-**"]}},
        *apply_test_infrastructure(pipeline, opts),
        env=merge_env(base_env(opts), {"IS_PRERELEASE": True}),
    )


def release_workflow(name: str, opts: Options) -> Workflow:
    pipeline = [
        jobs.prerequisites_job(opts),
        jobs.build_sdks_job(opts, True),
        jobs.test_job(opts),
        jobs.publish_job(opts),
        jobs.publish_sdk_job(opts),
        jobs.publish_java_sdk_job(opts),
        jobs.tag_sdk_job(),
        jobs.docs_build_dispatch_job(),
    ]
    return workflow(
        name,
        {"push": {"tags": ["v*.*.*", "!v*.*.*-**"]}},
        *apply_test_infrastructure(pipeline, opts),
        env=base_env(opts),
    )


def weekly_update_workflow(name: str, opts: Options) -> Workflow:
    return workflow(
        name,
        {"schedule": [{"cron": "35 12 * * 4"}], "workflow_dispatch": {}},
        jobs.weekly_update_job(opts),
        env=base_env(opts),
    )


def artifact_cleanup_workflow(name: str = "cleanup") -> Workflow:
    """Daily removal of old build artifacts; independent of provider options."""
    cleanup = jobs.empty_job("remove-old-artifacts").with_step(github.remove_old_artifacts())
    return workflow(
        name,
        {"schedule": [{"cron": "0 1 * * *"}], "workflow_dispatch": {}},
        cleanup,
    )


# ---------------------------------------------------------------------
# Opt-in workflows (Options.extra_workflows)
# ---------------------------------------------------------------------

def nightly_sdk_generation_workflow(name: str, opts: Options) -> Workflow:
    return workflow(
        name,
        {"schedule": [{"cron": "35 4 * * 1-5"}], "workflow_dispatch": {}},
        jobs.nightly_sdk_generation_job(opts),
        env=base_env(opts),
    )


def cf2pulumi_release_workflow(name: str, opts: Options) -> Workflow:
    return workflow(
        name,
        {"push": {"tags": ["v*.*.*", "!v*.*.*-**"]}},
        jobs.cf2pulumi_release_job(),
        env=base_env(opts),
    )


def arm2pulumi_release_workflow(name: str, opts: Options) -> Workflow:
    on = {
        "push": {"tags": ["v*.*.*", "!v*.*.*-**"]},
        "workflow_dispatch": {
            "inputs": {
                "version": {
                    "description": "The version of the binary to deploy - do not include the pulumi prefix in the name.",
                    "required": True,
                    "type": "string",
                },
            },
        },
    }
    return workflow(name, on, jobs.arm2pulumi_release_job(), env=base_env(opts))


def arm2pulumi_coverage_report_workflow(name: str, opts: Options) -> Workflow:
    return workflow(
        name,
        {"schedule": [{"cron": "35 17 * * *"}], "workflow_dispatch": {}},
        jobs.arm2pulumi_coverage_job(opts),
        env=base_env(opts),
    )
