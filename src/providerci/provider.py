# provider.py
from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Callable, Dict, List

from . import goreleaser, workflows
from .config import Options, load_options
from .model import Document, ProviderFile

WORKFLOWS_DIR = PurePosixPath(".github", "workflows")


def _workflow_path(filename: str) -> str:
    return str(WORKFLOWS_DIR / filename)


PROVIDER_FILE_PATHS: List[str] = [
    _workflow_path("artifact-cleanup.yml"),
    _workflow_path("command-dispatch.yml"),
    _workflow_path("pull-request.yml"),
    _workflow_path("run-acceptance-tests.yml"),
    _workflow_path("weekly-pulumi-update.yml"),
    _workflow_path("build.yml"),
    _workflow_path("prerelease.yml"),
    _workflow_path("release.yml"),
    ".goreleaser.prerelease.yml",
    ".goreleaser.yml",
]

# kind -> (path, builder); kinds are the values accepted by Options.extra_workflows
EXTRA_WORKFLOWS: Dict[str, tuple[str, Callable[[str, Options], Document]]] = {
    "nightly-sdk-generation": (
        _workflow_path("nightly-sdk-generation.yml"),
        workflows.nightly_sdk_generation_workflow,
    ),
    "cf2pulumi-release": (
        _workflow_path("cf2pulumi-release.yml"),
        workflows.cf2pulumi_release_workflow,
    ),
    "arm2pulumi-release": (
        _workflow_path("arm2pulumi-release.yml"),
        workflows.arm2pulumi_release_workflow,
    ),
    "arm2pulumi-coverage-report": (
        _workflow_path("arm2pulumi-coverage-report.yml"),
        workflows.arm2pulumi_coverage_report_workflow,
    ),
}


def provider_files(opts: Options) -> List[ProviderFile]:
    """
    Build every document for one provider.

    Pure: no file reads or writes. The fixed files come first, in
    PROVIDER_FILE_PATHS order, followed by any opted-in extra workflows.
    """
    documents: List[Document] = [
        workflows.artifact_cleanup_workflow(),
        workflows.command_dispatch_workflow("command-dispatch", opts),
        workflows.pull_request_workflow("pull-request", opts),
        workflows.run_acceptance_tests_workflow("run-acceptance-tests", opts),
        workflows.weekly_update_workflow("weekly-pulumi-update", opts),
        workflows.build_workflow("build", opts),
        workflows.prerelease_workflow("prerelease", opts),
        workflows.release_workflow("release", opts),
        goreleaser.prerelease_config(opts),
        goreleaser.release_config(opts),
    ]
    files = [ProviderFile(path, doc) for path, doc in zip(PROVIDER_FILE_PATHS, documents)]

    seen = set()
    for kind in opts.extra_workflows:
        if kind in seen:
            continue
        seen.add(kind)
        path, builder = EXTRA_WORKFLOWS[kind]
        files.append(ProviderFile(path, builder(kind, opts)))

    return files


def build_provider_files(provider: str, providers_dir: str | Path | None = None) -> List[ProviderFile]:
    """
    Load a provider's options and build its documents.

    Raises:
        UnknownProviderError: if the provider has no config
        OptionsValidationError: if its config is invalid
    """
    opts = load_options(provider, providers_dir)
    return provider_files(opts)
