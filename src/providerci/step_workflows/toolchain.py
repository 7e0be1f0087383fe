# step_workflows/toolchain.py
from __future__ import annotations

from typing import Optional

from ..dsl import sh, uses
from ..model import Step
from . import actions


# ---------------------------------------------------------------------
# Language toolchains
# ---------------------------------------------------------------------

def install_go(version: Optional[str] = None) -> Step:
    return uses(
        "Install Go",
        actions.SETUP_GO,
        with_={
            "go-version": version or "${{ env.GOVERSION }}",
            "cache-dependency-path": "**/*.sum",
        },
    )


def install_nodejs() -> Step:
    return uses(
        "Setup Node",
        actions.SETUP_NODE,
        with_={
            "node-version": "${{ env.NODEVERSION }}",
            "registry-url": "https://registry.npmjs.org",
        },
    )


def install_dotnet() -> Step:
    return uses("Setup DotNet", actions.SETUP_DOTNET, with_={"dotnet-version": "${{ env.DOTNETVERSION }}"})


def install_python() -> Step:
    return uses("Setup Python", actions.SETUP_PYTHON, with_={"python-version": "${{ env.PYTHONVERSION }}"})


def install_java() -> Step:
    return uses(
        "Setup Java",
        actions.SETUP_JAVA,
        with_={
            "cache": "gradle",
            "distribution": "temurin",
            "java-version": "${{ env.JAVAVERSION }}",
        },
    )


def install_gradle(version: str) -> Step:
    return uses("Setup Gradle", actions.SETUP_GRADLE, with_={"gradle-version": version})


# ---------------------------------------------------------------------
# Pulumi tooling
# ---------------------------------------------------------------------

def install_pulumictl() -> Step:
    return uses("Install pulumictl", actions.INSTALL_GH_RELEASE, with_={"repo": "pulumi/pulumictl"})


def install_pulumi_cli(version: Optional[str] = None) -> Step:
    """Install the Pulumi CLI; pinned only when a version is given."""
    return uses(
        "Install Pulumi CLI",
        actions.INSTALL_PULUMI_CLI,
        with_={"pulumi-version": version} if version else None,
    )


def install_schema_tools() -> Step:
    return uses("Install Schema Tools", actions.INSTALL_GH_RELEASE, with_={"repo": "pulumi/schema-tools"})


def install_twine() -> Step:
    return sh("Install Twine", "python -m pip install pip twine")


def setup_gotestfmt() -> Step:
    return uses(
        "Install gotestfmt",
        actions.GOTESTFMT,
        with_={"version": "v2.4.0", "token": "${{ secrets.GITHUB_TOKEN }}"},
    )


# ---------------------------------------------------------------------
# SDK test dependencies
# ---------------------------------------------------------------------

def update_path() -> Step:
    return sh("Update path", 'echo "${{ github.workspace }}/bin" >> $GITHUB_PATH')


def install_node_deps() -> Step:
    return sh("Install Node dependencies", "yarn global add typescript")


def set_nuget_source() -> Step:
    return sh("Set Nuget Source", "dotnet nuget add source ${{ github.workspace }}/nuget")


def install_python_deps() -> Step:
    return sh("Install Python deps", "pip3 install virtualenv==20.0.23\npip3 install pipenv")


def install_sdk_deps() -> Step:
    return sh("Install dependencies", "make install_${{ matrix.language}}_sdk")
