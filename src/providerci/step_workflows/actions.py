# step_workflows/actions.py
# Pinned references for every external action the catalog uses.
from __future__ import annotations

CHECKOUT = "actions/checkout@v3"
SETUP_GO = "actions/setup-go@v4"
SETUP_NODE = "actions/setup-node@v3"
SETUP_DOTNET = "actions/setup-dotnet@v3"
SETUP_PYTHON = "actions/setup-python@v4"
SETUP_JAVA = "actions/setup-java@v3"
SETUP_GRADLE = "gradle/gradle-build-action@v2"
UPLOAD_ARTIFACT = "actions/upload-artifact@v3"
DOWNLOAD_ARTIFACT = "actions/download-artifact@v3"
INSTALL_GH_RELEASE = "jaxxstorm/action-install-gh-release@v1.10.0"
INSTALL_PULUMI_CLI = "pulumi/actions@v4"
GIT_STATUS_CHECK = "pulumi/git-status-check-action@v1"
SLASH_COMMAND = "peter-evans/slash-command-dispatch@v2"
CREATE_OR_UPDATE_COMMENT = "peter-evans/create-or-update-comment@v1"
PR_COMMENT = "thollander/actions-comment-pull-request@v2"
ADD_LABELS = "actions-ecosystem/action-add-labels@v1.1.0"
NOTIFY_SLACK = "8398a7/action-slack@v3"
CODECOV = "codecov/codecov-action@v3"
GOTESTFMT = "GoTestTools/gotestfmt-action@v2"
AWS_CREDENTIALS = "aws-actions/configure-aws-credentials@v2"
GOOGLE_AUTH = "google-github-actions/auth@v0"
SETUP_GCLOUD = "google-github-actions/setup-gcloud@v0"
AZURE_LOGIN = "azure/login@v1"
GOLANGCI_LINT = "golangci/golangci-lint-action@v3"
GORELEASER = "goreleaser/goreleaser-action@v2"
REMOVE_ARTIFACTS = "c-hive/gha-remove-artifacts@v1"
CREATE_PULL_REQUEST = "repo-sync/pull-request@v2"
CHOCOLATEY = "crazy-max/ghaction-chocolatey@v2"
