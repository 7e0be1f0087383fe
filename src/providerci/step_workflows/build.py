# step_workflows/build.py
from __future__ import annotations

from typing import Optional

from ..dsl import sh, uses
from ..model import INERT, Step
from . import actions

SCHEMA_CHECK_HEADER = "### Does the PR have any schema changes?"


# ---------------------------------------------------------------------
# Provider build
# ---------------------------------------------------------------------

def initialize_submodules(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh("Initialize submodules", "make init_submodules")


def build_codegen_binaries(enabled: bool = True) -> Step:
    if not enabled:
        return INERT
    return sh("Build codegen binaries", "make codegen")


def build_schema() -> Step:
    return sh("Build Schema", "make generate_schema")


def check_schema_changes(default_branch: str) -> Step:
    return sh(
        "Check Schema is Valid",
        "echo 'SCHEMA_CHANGES<<EOF' >> $GITHUB_ENV\n"
        f"schema-tools compare ${{{{ env.PROVIDER }}}} {default_branch} --json >> $GITHUB_ENV\n"
        "echo 'EOF' >> $GITHUB_ENV",
        env={"GITHUB_TOKEN": "${{ secrets.PULUMI_BOT_TOKEN }}"},
    )


def comment_schema_changes_on_pr() -> Step:
    return uses(
        "Comment on PR with Details of Schema Check",
        actions.PR_COMMENT,
        if_="github.event_name == 'pull_request' && github.event.pull_request.head.repo.full_name == github.repository",
        with_={
            "message": f"{SCHEMA_CHECK_HEADER}\n\n${{{{ env.SCHEMA_CHANGES }}}}\n",
            "comment_tag": "schemaCheck",
            "GITHUB_TOKEN": "${{ secrets.PULUMI_BOT_TOKEN }}",
        },
    )


def label_if_no_breaking_changes() -> Step:
    return uses(
        "Check if there are no breaking changes",
        actions.ADD_LABELS,
        if_="contains(env.SCHEMA_CHANGES, 'Looking good! No breaking changes found.') && github.actor == 'pulumi-bot'",
        with_={"labels": "impact/no-changelog-required", "number": "${{ github.event.issue.number }}"},
    )


def build_provider() -> Step:
    return sh("Build Provider", "make provider")


def check_clean_worktree() -> Step:
    return uses(
        "Check worktree clean",
        actions.GIT_STATUS_CHECK,
        with_={
            "allowed-changes": "sdk/**/pulumi-plugin.json\nsdk/dotnet/Pulumi.*.csproj\nsdk/go/*/internal/pulumiUtilities.go\nsdk/nodejs/package.json\nsdk/python/pyproject.toml",
        },
    )


def git_status() -> Step:
    return sh("Commit changes", "git status --porcelain")


# ---------------------------------------------------------------------
# Provider binaries
# ---------------------------------------------------------------------

def tar_provider_binaries() -> Step:
    return sh(
        "Tar provider binaries",
        "tar -zcf ${{ github.workspace }}/bin/provider.tar.gz -C ${{ github.workspace }}/bin/ "
        "pulumi-resource-${{ env.PROVIDER }} pulumi-gen-${{ env.PROVIDER}}",
    )


def upload_provider_binaries() -> Step:
    return uses(
        "Upload artifacts",
        actions.UPLOAD_ARTIFACT,
        with_={
            "name": "${{ env.PROVIDER }}-provider.tar.gz",
            "path": "${{ github.workspace }}/bin/provider.tar.gz",
        },
    )


def download_provider_binaries() -> Step:
    return uses(
        "Download provider + tfgen binaries",
        actions.DOWNLOAD_ARTIFACT,
        with_={"name": "${{ env.PROVIDER }}-provider.tar.gz", "path": "${{ github.workspace }}/bin"},
    )


def untar_provider_binaries() -> Step:
    return sh(
        "Untar provider binaries",
        "tar -zxf ${{ github.workspace }}/bin/provider.tar.gz -C ${{ github.workspace}}/bin",
    )


def restore_binary_perms() -> Step:
    return sh(
        "Restore Binary Permissions",
        'find ${{ github.workspace }} -name "pulumi-*-${{ env.PROVIDER }}" -print -exec chmod +x {} \\;',
    )


def test_provider_library() -> Step:
    return sh("Test Provider Library", "make test_provider")


def codecov() -> Step:
    return uses("Upload coverage reports to Codecov", actions.CODECOV, env={"CODECOV_TOKEN": "${{ secrets.CODECOV_TOKEN }}"})


# ---------------------------------------------------------------------
# SDKs (per matrix.language)
# ---------------------------------------------------------------------

def generate_sdks() -> Step:
    return sh("Generate SDK", "make ${{ matrix.language }}_sdk")


def build_sdks() -> Step:
    return sh("Build SDK", "make build_${{ matrix.language }}")


def zip_sdks() -> Step:
    return sh("Compress SDK folder", "tar -zcf sdk/${{ matrix.language }}.tar.gz -C sdk/${{ matrix.language }} .")


def upload_sdks(tag: bool) -> Step:
    """Tagged builds keep their SDK artifacts longer so publish jobs can re-run."""
    return uses(
        "Upload artifacts",
        actions.UPLOAD_ARTIFACT,
        with_={
            "name": "${{ matrix.language  }}-sdk.tar.gz",
            "path": "${{ github.workspace}}/sdk/${{ matrix.language }}.tar.gz",
            "retention-days": 30 if tag else 5,
        },
    )


def download_sdks() -> Step:
    return uses(
        "Download SDK",
        actions.DOWNLOAD_ARTIFACT,
        with_={"name": "${{ matrix.language }}-sdk.tar.gz", "path": "${{ github.workspace}}/sdk/"},
    )


def unzip_sdks() -> Step:
    return sh(
        "Uncompress SDK folder",
        "tar -zxf ${{ github.workspace}}/sdk/${{ matrix.language}}.tar.gz -C ${{ github.workspace}}/sdk/${{ matrix.language}}",
    )


# ---------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------

def run_setup_script(script: Optional[str]) -> Step:
    if not script:
        return INERT
    return sh("Run setup script", script)


def run_docker_compose(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh("Run docker compose", "docker-compose -f testing/docker-compose.yml up --build -d")


def run_tests() -> Step:
    return sh(
        "Run tests",
        "set -euo pipefail\n"
        "cd examples && go test -v -json -count=1 -cover -timeout 2h -tags=${{ matrix.language }} -parallel 4 . 2>&1 | tee /tmp/gotest.log | gotestfmt",
    )
