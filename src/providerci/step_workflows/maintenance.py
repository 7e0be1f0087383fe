# step_workflows/maintenance.py
# Steps for the scheduled workflows (dependency bumps, SDK regeneration)
# and the auxiliary converter-tool releases.
from __future__ import annotations

from ..dsl import sh, uses
from ..model import INERT, Step
from . import actions

BOT_ENV = {"GITHUB_TOKEN": "${{ secrets.PULUMI_BOT_TOKEN }}"}


# ---------------------------------------------------------------------
# Weekly Pulumi update
# ---------------------------------------------------------------------

def update_pulumi() -> Step:
    return sh("Update Pulumi/Pulumi", "make ensure\ngo get github.com/pulumi/pulumi/sdk/v3@latest && go mod tidy", cwd="provider")


def provider_with_pulumi_upgrade() -> Step:
    return sh(
        "Provider with Pulumi Upgrade",
        "make codegen && make local_generate\n"
        "git add sdk/nodejs\n"
        'git commit -m "Regenerating Node.js SDK based on updated modules" || echo "ignore commit failure, may be empty"\n'
        "git add sdk/python\n"
        'git commit -m "Regenerating Python SDK based on updated modules" || echo "ignore commit failure, may be empty"\n'
        "git add sdk/dotnet\n"
        'git commit -m "Regenerating .NET SDK based on updated modules" || echo "ignore commit failure, may be empty"\n'
        "git add sdk/go*\n"
        'git commit -m "Regenerating Go SDK based on updated modules" || echo "ignore commit failure, may be empty"\n'
        "git add sdk/java*\n"
        'git commit -m "Regenerating Java SDK based on updated modules" || echo "ignore commit failure, may be empty"\n'
        "git push origin update-pulumi/${{ github.run_id }}-${{ github.run_number }}",
    )


def prepare_update_branch() -> Step:
    return sh(
        "Preparing Git Branch",
        'git config --local user.email "bot@pulumi.com"\n'
        'git config --local user.name "pulumi-bot"\n'
        "git checkout -b update-pulumi/${{ github.run_id }}-${{ github.run_number }}",
    )


def create_update_pulumi_pr(default_branch: str) -> Step:
    return sh(
        "Create PR",
        "ver=$(cat provider/go.mod | grep -m1 'github.com/pulumi/pulumi/sdk/v3' | awk '{print $2}')\n"
        'msg="Automated upgrade: bump pulumi/pulumi to ${ver}"\n'
        f'gh pr create -t "$msg" -b "$msg" -B {default_branch}',
        env=dict(BOT_ENV),
    )


# ---------------------------------------------------------------------
# Nightly SDK generation
# ---------------------------------------------------------------------

def make_clean() -> Step:
    return sh("Cleanup SDK Folder", "make clean")


def prepare_sdk_generation_branch() -> Step:
    return sh(
        "Preparing Git Branch",
        'git config --local user.email "bot@pulumi.com"\n'
        'git config --local user.name "pulumi-bot"\n'
        "git checkout -b generate-sdk/${{ github.run_id }}-${{ github.run_number }}",
    )


def commit_empty_sdk() -> Step:
    return sh("Commit Empty SDK", 'git add .\ngit commit -m "Preparing the SDK folder for regeneration"')


def update_submodules(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh("Update Submodules", "make update_submodules")


def make_discovery(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh("Discovery", "make discovery")


def make_local_generate() -> Step:
    return sh("Build SDKs", "make local_generate")


def set_submodule_commit_hash(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh(
        "Set submodule commit hash",
        'echo "SUBMODULE_COMMIT=$(git rev-parse --short HEAD:azure-rest-api-specs)" >> $GITHUB_ENV',
    )


def commit_automated_sdk_updates() -> Step:
    return sh(
        "Commit SDK changes",
        'git add sdk\ngit commit -m "Regenerating SDKs based on updated submodules" || echo "ignore commit failure, may be empty"\n'
        "git push origin generate-sdk/${{ github.run_id }}-${{ github.run_number }}",
    )


def pull_request_sdk_generation(default_branch: str) -> Step:
    return uses(
        "Create PR",
        actions.CREATE_PULL_REQUEST,
        with_={
            "destination_branch": default_branch,
            "github_token": "${{ secrets.PULUMI_BOT_TOKEN }}",
            "pr_allow_empty": True,
            "pr_assignee": "pulumi-bot",
            "pr_body": "*Automated PR*",
            "pr_label": "automation/merge",
            "pr_title": "Automated SDK generation @ ${{ env.PROVIDER }} ${{ env.SUBMODULE_COMMIT }}",
            "author_name": "pulumi-bot",
            "source_branch": "generate-sdk/${{ github.run_id }}-${{ github.run_number }}",
        },
    )


# ---------------------------------------------------------------------
# Converter tools (cf2pulumi / arm2pulumi)
# ---------------------------------------------------------------------

def chocolatey_package_deployment() -> Step:
    return uses(
        "Chocolatey Package Deployment",
        actions.CHOCOLATEY,
        with_={"args": "push ./dist/cf2pulumi.*.nupkg --source https://push.chocolatey.org/ --api-key ${{ secrets.CHOCOLATEY_API_KEY }}"},
    )


def set_version_if_available() -> Step:
    return sh(
        "Set version if available",
        'if [ -n "${{ github.event.inputs.version }}" ]; then\n'
        '  echo "GORELEASER_CURRENT_TAG=v${{ github.event.inputs.version }}" >> $GITHUB_ENV\n'
        "fi",
    )


def generate_coverage_report() -> Step:
    return sh("Generate coverage report", "make arm2pulumi_coverage_report")


def coverage_results_json() -> Step:
    return sh("Test results JSON", "cat provider/pkg/arm2pulumi/internal/testdata/summary.json")


def configure_aws_credentials_for_coverage_report() -> Step:
    return uses(
        "Configure AWS Credentials",
        actions.AWS_CREDENTIALS,
        with_={
            "aws-access-key-id": "${{ secrets.AWS_ACCESS_KEY_ID }}",
            "aws-region": "us-west-2",
            "aws-secret-access-key": "${{ secrets.AWS_SECRET_ACCESS_KEY }}",
            "role-duration-seconds": 3600,
            "role-external-id": "upload-pulumi-release",
            "role-session-name": "arm2pulumi@githubActions",
            "role-to-assume": "${{ secrets.AWS_UPLOAD_ROLE_ARN }}",
        },
    )


def upload_coverage_to_s3() -> Step:
    return sh(
        "Upload results to S3",
        "cd provider/pkg/arm2pulumi/internal/testdata && "
        "bash s3-upload-script.sh",
    )
