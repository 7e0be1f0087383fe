from __future__ import annotations

import itertools

import pytest

from providerci import workflows
from providerci.config import Options
from providerci.dsl import DISPATCH_CONDITION
from providerci.model import Workflow
from providerci.provider import provider_files

EXTRAS = ["nightly-sdk-generation", "cf2pulumi-release", "arm2pulumi-release", "arm2pulumi-coverage-report"]


def _all_workflows(opts: Options) -> list[Workflow]:
    return [f.data for f in provider_files(opts) if isinstance(f.data, Workflow)]


def test_merge_env_override_wins_and_inputs_untouched() -> None:
    base = {"A": "1", "B": "2"}
    overrides = {"B": "3", "C": "4"}
    assert workflows.merge_env(base, overrides) == {"A": "1", "B": "3", "C": "4"}
    assert base == {"A": "1", "B": "2"}
    assert overrides == {"B": "3", "C": "4"}
    assert workflows.merge_env(base, None) == base


def test_base_env_includes_provider_and_overrides() -> None:
    opts = Options(provider="widget", env={"AWS_REGION": "us-west-2", "TRAVIS_OS_NAME": "macos"})
    env = workflows.base_env(opts)
    assert env["PROVIDER"] == "widget"
    assert env["AWS_REGION"] == "us-west-2"
    assert env["TRAVIS_OS_NAME"] == "macos"


@pytest.mark.parametrize(
    "lint, infra, expected",
    [
        (False, False, ["test"]),
        (True, False, ["test", "lint"]),
        (False, True, ["test", "teardown-cluster"]),
        (True, True, ["test", "lint", "teardown-cluster"]),
    ],
)
def test_sentinel_needs(lint: bool, infra: bool, expected: list[str]) -> None:
    assert workflows.sentinel_needs(lint, infra) == expected


def test_acceptance_workflow_for_cluster_provider(cluster_opts: Options) -> None:
    wf = workflows.run_acceptance_tests_workflow("run-acceptance-tests", cluster_opts)
    assert set(wf.jobs) >= {
        "prerequisites",
        "build_sdks",
        "test",
        "lint",
        "sentinel",
        "build-test-cluster",
        "teardown-cluster",
    }
    assert wf.needs_of("sentinel") == ("test", "lint", "teardown-cluster")
    assert set(wf.needs_of("test")) == {"build_sdks", "build-test-cluster"}
    assert wf.needs_of("teardown-cluster") == ("build-test-cluster", "test")


def test_acceptance_workflow_without_lint_or_infra() -> None:
    opts = Options(provider="widget", lint=False)
    wf = workflows.run_acceptance_tests_workflow("run-acceptance-tests", opts)
    assert "lint" not in wf.jobs
    assert "build-test-cluster" not in wf.jobs
    assert wf.needs_of("sentinel") == ("test",)
    assert wf.needs_of("test") == ("build_sdks",)


@pytest.mark.parametrize(
    "lint, infra, extras",
    list(itertools.product([False, True], [False, True], [[], EXTRAS])),
)
def test_every_need_is_a_job_in_the_same_workflow(lint: bool, infra: bool, extras: list[str]) -> None:
    opts = Options(provider="widget", lint=lint, test_infrastructure=infra, extra_workflows=extras)
    for wf in _all_workflows(opts):
        for key, job in wf.jobs.items():
            assert key == job.name
            for need in job.needs:
                assert need in wf.jobs, f"{wf.name}: {key} needs missing {need}"


def test_no_inert_steps_in_any_job(cluster_opts: Options) -> None:
    opts = cluster_opts.model_copy(update={"extra_workflows": EXTRAS})
    for wf in _all_workflows(opts):
        for job in wf.jobs.values():
            assert job.steps, f"{wf.name}/{job.name} has no steps"
            for step in job.steps:
                assert not step.inert


def test_dispatched_jobs_check_out_the_pr_commit_once(cluster_opts: Options) -> None:
    wf = workflows.run_acceptance_tests_workflow("run-acceptance-tests", cluster_opts)
    for key in ("prerequisites", "build_sdks", "test", "lint", "build-test-cluster", "teardown-cluster"):
        checkouts = [s for s in wf.jobs[key].steps if s.name == "Checkout Repo"]
        assert len(checkouts) == 1, key
        assert checkouts[0].with_ == {"ref": "${{ env.PR_COMMIT_SHA }}"}
    assert wf.jobs["prerequisites"].if_ == DISPATCH_CONDITION
    assert wf.env["PR_COMMIT_SHA"] == "${{ github.event.client_payload.pull_request.head.sha }}"


def test_pushed_jobs_keep_plain_checkout(widget_opts: Options) -> None:
    wf = workflows.build_workflow("build", widget_opts)
    checkout = next(s for s in wf.jobs["prerequisites"].steps if s.name == "Checkout Repo")
    assert checkout.with_ is None
    assert wf.jobs["prerequisites"].if_ is None


def test_optional_steps_follow_flags() -> None:
    plain = workflows.build_workflow("build", Options(provider="widget"))
    loaded = workflows.build_workflow(
        "build",
        Options(provider="widget", aws=True, docker=True, setup_script="./setup.sh", submodules=True),
    )
    plain_names = {s.name for s in plain.jobs["test"].steps}
    loaded_names = {s.name for s in loaded.jobs["test"].steps}
    assert "Configure AWS Credentials" not in plain_names
    assert "Run docker compose" not in plain_names
    assert {"Configure AWS Credentials", "Run docker compose", "Run setup script", "Initialize submodules"} <= (
        loaded_names | {s.name for s in loaded.jobs["prerequisites"].steps}
    )


def test_no_cluster_jobs_without_test_infrastructure(widget_opts: Options) -> None:
    wf = workflows.build_workflow("build", widget_opts)
    assert "build-test-cluster" not in wf.jobs
    assert "teardown-cluster" not in wf.jobs


def test_teardown_always_runs_on_push(cluster_opts: Options) -> None:
    wf = workflows.release_workflow("release", cluster_opts)
    assert wf.jobs["teardown-cluster"].if_ == "${{ always() }}"
    assert wf.jobs["build-test-cluster"].outputs == {"stack-name": "${{ steps.stackname.outputs.stack-name }}"}


def test_acceptance_triggers_include_additional_branches() -> None:
    opts = Options(provider="kubernetes", additional_branches=["v4"])
    wf = workflows.run_acceptance_tests_workflow("run-acceptance-tests", opts)
    assert wf.on["pull_request"]["branches"] == ["master", "main", "v4"]
    assert wf.on["repository_dispatch"] == {"types": ["run-acceptance-tests-command"]}


def test_pull_request_workflow_splits_forks_and_same_repo(widget_opts: Options) -> None:
    wf = workflows.pull_request_workflow("pull-request", widget_opts)
    assert "pull_request_target" in wf.on
    assert wf.jobs["comment-on-pr"].if_ == workflows.FORK_CONDITION
    assert wf.jobs["test"].if_ == workflows.SAME_REPO_CONDITION
    assert wf.env["PR_COMMIT_SHA"] == "${{ github.event.pull_request.head.sha }}"


def test_prerelease_and_release_publish_args(widget_opts: Options) -> None:
    opts = widget_opts.model_copy(update={"parallel": 2, "timeout": 90})
    pre = workflows.prerelease_workflow("prerelease", opts)
    rel = workflows.release_workflow("release", opts)
    pre_args = next(s for s in pre.jobs["publish"].steps if s.name == "Run GoReleaser").with_["args"]
    rel_args = next(s for s in rel.jobs["publish"].steps if s.name == "Run GoReleaser").with_["args"]
    assert pre_args == "-p 2 -f .goreleaser.prerelease.yml --rm-dist --skip-validate --timeout 90m0s"
    assert rel_args == "-p 2 release --rm-dist --timeout 90m0s"
    assert pre.env["IS_PRERELEASE"] is True
    assert "tag_sdk" in rel.jobs and "tag_sdk" not in pre.jobs


def test_release_uses_configured_runners() -> None:
    opts = Options(provider="widget", large_runner="big-box", publish_runner="publisher")
    wf = workflows.release_workflow("release", opts)
    assert wf.jobs["build_sdks"].runs_on == "big-box"
    assert wf.jobs["test"].runs_on == "big-box"
    assert wf.jobs["publish"].runs_on == "publisher"
    assert wf.jobs["publish_java_sdk"].continue_on_error is True


def test_artifact_cleanup_has_no_env() -> None:
    wf = workflows.artifact_cleanup_workflow()
    assert wf.name == "cleanup"
    assert "env" not in wf.to_dict()
    assert list(wf.jobs) == ["remove-old-artifacts"]


def test_weekly_update_targets_default_branch() -> None:
    opts = Options(provider="widget", provider_default_branch="main")
    wf = workflows.weekly_update_workflow("weekly-pulumi-update", opts)
    job = wf.jobs["weekly-pulumi-update"]
    assert any("main" in str(s.to_dict()) for s in job.steps)


def _ancestors(wf: Workflow, key: str) -> set[str]:
    seen: set[str] = set()
    stack = list(wf.needs_of(key))
    while stack:
        need = stack.pop()
        if need not in seen:
            seen.add(need)
            stack.extend(wf.needs_of(need))
    return seen


def test_widget_pipelines(widget_opts: Options) -> None:
    for build in (workflows.pull_request_workflow, workflows.build_workflow, workflows.release_workflow):
        wf = build("wf", widget_opts)
        assert "build_sdks" in wf.needs_of("test")

    release = workflows.release_workflow("release", widget_opts)
    for key in ("publish", "publish_sdk", "publish_java_sdk", "tag_sdk", "dispatch_docs_build"):
        assert "test" in _ancestors(release, key), key


def test_lint_version_comes_from_base_env(widget_opts: Options) -> None:
    wf = workflows.build_workflow("build", widget_opts)
    lint_step = next(s for s in wf.jobs["lint"].steps if s.name == "golangci-lint provider pkg")
    assert lint_step.with_["version"] == "${{ env.GOLANGCI_LINT_VERSION }}"
    assert wf.env["GOLANGCI_LINT_VERSION"]

    pinned = Options(provider="widget", env={"GOLANGCI_LINT_VERSION": "v1.60.0"})
    assert workflows.base_env(pinned)["GOLANGCI_LINT_VERSION"] == "v1.60.0"
