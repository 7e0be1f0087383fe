# step_workflows/cloud.py
from __future__ import annotations

from ..dsl import sh, uses
from ..model import INERT, Step
from . import actions

STACK_NAME_OUTPUT = "${{ steps.stackname.outputs.stack-name }}"


# ---------------------------------------------------------------------
# Cloud credentials
# ---------------------------------------------------------------------

def configure_aws_credentials_for_tests(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return uses(
        "Configure AWS Credentials",
        actions.AWS_CREDENTIALS,
        with_={
            "aws-access-key-id": "${{ secrets.AWS_ACCESS_KEY_ID }}",
            "aws-region": "${{ env.AWS_REGION }}",
            "aws-secret-access-key": "${{ secrets.AWS_SECRET_ACCESS_KEY }}",
            "role-duration-seconds": 3600,
            "role-session-name": "${{ env.PROVIDER }}@githubActions",
            "role-to-assume": "${{ secrets.AWS_CI_ROLE_ARN }}",
        },
    )


def configure_aws_credentials_for_publish() -> Step:
    return uses(
        "Configure AWS Credentials",
        actions.AWS_CREDENTIALS,
        with_={
            "aws-access-key-id": "${{ secrets.AWS_ACCESS_KEY_ID }}",
            "aws-region": "us-east-2",
            "aws-secret-access-key": "${{ secrets.AWS_SECRET_ACCESS_KEY }}",
            "role-duration-seconds": 3600,
            "role-external-id": "upload-pulumi-release",
            "role-session-name": "${{ env.PROVIDER}}@githubActions",
            "role-to-assume": "${{ secrets.AWS_UPLOAD_ROLE_ARN }}",
        },
    )


def google_auth(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return uses(
        "Authenticate to Google Cloud",
        actions.GOOGLE_AUTH,
        with_={
            "workload_identity_provider": (
                "projects/${{ env.GOOGLE_PROJECT_NUMBER }}/locations/global/workloadIdentityPools/"
                "${{ env.GOOGLE_CI_WORKLOAD_IDENTITY_POOL }}/providers/${{ env.GOOGLE_CI_WORKLOAD_IDENTITY_PROVIDER }}"
            ),
            "service_account": "${{ env.GOOGLE_CI_SERVICE_ACCOUNT_EMAIL }}",
        },
    )


def setup_gcloud(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return uses("Setup gcloud auth", actions.SETUP_GCLOUD, with_={"install_components": "gke-gcloud-auth-plugin"})


def azure_login(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return uses(
        "Login to Azure",
        actions.AZURE_LOGIN,
        with_={"creds": "${{ secrets.AZURE_RBAC_SERVICE_PRINCIPAL }}"},
    )


# ---------------------------------------------------------------------
# Test cluster (only for providers with dedicated test infrastructure)
# ---------------------------------------------------------------------

def make_kube_dir(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh("Make Kube Directory", 'mkdir -p "~/.kube/"')


def download_kubeconfig(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return uses("Download Kubeconfig", actions.DOWNLOAD_ARTIFACT, with_={"name": "config", "path": "~/.kube/"})


def install_kubectl(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh(
        "Install Kubectl",
        'curl -LO https://dl.k8s.io/release/$(curl -L -s https://dl.k8s.io/release/stable.txt)/bin/linux/amd64/kubectl\n'
        "chmod +x ./kubectl\n"
        "sudo mv kubectl /usr/local/bin\n"
        "kubectl version --client",
    )


def install_and_configure_helm(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh(
        "Install and configure Helm",
        "curl -o- -L https://raw.githubusercontent.com/helm/helm/main/scripts/get-helm-3 | bash\n"
        "helm repo add stable https://charts.helm.sh/stable\n"
        "helm repo update",
    )


def login_google_cloud_registry(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh("Login to Google Cloud Registry", "gcloud --quiet auth configure-docker")


def set_stack_name(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh(
        "Set stack name in output",
        'echo "stack-name=${{ env.PULUMI_TEST_OWNER }}/${{ github.sha }}-${{ github.run_id }}-${{ github.run_attempt }}" >> "$GITHUB_OUTPUT"',
        id="stackname",
    )


def create_test_cluster(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh(
        "Create test infrastructure",
        f"./scripts/ci-cluster-create.sh {STACK_NAME_OUTPUT}",
    )


def upload_kubernetes_artifacts(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return uses("Upload Kubernetes Artifacts", actions.UPLOAD_ARTIFACT, with_={"name": "config", "path": "~/.kube/config"})


def destroy_test_cluster(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return sh(
        "Destroy test infra",
        "./scripts/ci-cluster-destroy.sh ${{ needs.build-test-cluster.outputs.stack-name }}",
    )


def delete_kubeconfig_artifact(enabled: bool) -> Step:
    if not enabled:
        return INERT
    return uses("Delete Kubeconfig Artifact", actions.REMOVE_ARTIFACTS, with_={"age": "1s", "name": "config"})
