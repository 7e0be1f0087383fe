# step_workflows/release.py
from __future__ import annotations

from ..dsl import sh, uses
from ..model import Step
from . import actions

GENERIC_VERSION = "$(pulumictl get version --language generic)"


def set_prerelease_version() -> Step:
    return sh(
        "Set PreRelease Version",
        f'echo "GORELEASER_CURRENT_TAG=v{GENERIC_VERSION}" >> $GITHUB_ENV',
    )


def run_goreleaser(args: str) -> Step:
    return uses("Run GoReleaser", actions.GORELEASER, with_={"args": args, "version": "latest"})


def download_specific_sdk(language: str) -> Step:
    return uses(
        f"Download {language} SDK",
        actions.DOWNLOAD_ARTIFACT,
        with_={"name": f"{language}-sdk.tar.gz", "path": "${{ github.workspace}}/sdk/"},
    )


def unzip_specific_sdk(language: str) -> Step:
    return sh(
        f"Uncompress {language} SDK",
        f"tar -zxf ${{{{github.workspace}}}}/sdk/{language}.tar.gz -C ${{{{github.workspace}}}}/sdk/{language}",
    )


def run_publish_sdk() -> Step:
    return sh(
        "Publish SDKs",
        "./ci-scripts/ci/publish-tfgen-package ${{ github.workspace }}",
        env={"NODE_AUTH_TOKEN": "${{ secrets.NPM_TOKEN }}"},
    )


def set_package_version_to_env() -> Step:
    return sh("Set PACKAGE_VERSION to Env", f'echo "PACKAGE_VERSION={GENERIC_VERSION}" >> $GITHUB_ENV')


def run_publish_java_sdk() -> Step:
    return uses(
        "Publish Java SDK",
        actions.SETUP_GRADLE,
        with_={
            "arguments": "publishToSonatype closeAndReleaseSonatypeStagingRepository",
            "build-root-directory": "./sdk/java",
            "gradle-version": "7.4.1",
        },
    )


def tag_sdk() -> Step:
    return sh(
        "Add SDK version tag",
        f"git tag sdk/v{GENERIC_VERSION} && git push origin sdk/v{GENERIC_VERSION}",
    )


def dispatch_docs_build() -> Step:
    return sh(
        "Dispatch Event",
        "pulumictl create docs-build pulumi-${{ env.PROVIDER }} ${GITHUB_REF#refs/tags/}",
        env={"GITHUB_TOKEN": "${{ secrets.PULUMI_BOT_TOKEN }}"},
    )
