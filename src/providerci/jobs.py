# jobs.py
# One factory per job role. Each returns a JobBuilder so workflow assemblers
# can refine it (dispatch mode, extra needs) before it is frozen.
from __future__ import annotations

from .config import Options
from .dsl import JobBuilder, matrix
from .step_workflows import build, checkout, cloud, github, lint, maintenance, release, toolchain

PYTHON_VERSION = "3.7"
GO_VERSION = "1.21.x"
NODE_VERSION = "16.x"
DOTNET_VERSION = "6.0.x\n3.1.301\n"
JAVA_VERSION = "11"
GRADLE_VERSION = "7.6"
GOLANGCI_LINT_VERSION = "v1.55.2"

LANGUAGES = ["nodejs", "python", "dotnet", "go", "java"]

# job names other jobs refer to
PREREQUISITES = "prerequisites"
BUILD_SDKS = "build_sdks"
TEST = "test"
LINT = "lint"
BUILD_TEST_CLUSTER = "build-test-cluster"
TEARDOWN_CLUSTER = "teardown-cluster"
PUBLISH = "publish"
PUBLISH_SDK = "publish_sdk"
PUBLISH_JAVA_SDK = "publish_java_sdk"
TAG_SDK = "tag_sdk"
DISPATCH_DOCS_BUILD = "dispatch_docs_build"

CLUSTER_PERMISSIONS = {"contents": "read", "id_token": "write"}


def empty_job(name: str) -> JobBuilder:
    return JobBuilder(name)


def prerequisites_job(opts: Options) -> JobBuilder:
    """Build the provider binary and schema; everything else downloads its artifacts."""
    return JobBuilder(PREREQUISITES).with_step(
        checkout.checkout_repo(),
        checkout.checkout_scripts_repo(),
        checkout.checkout_tags(),
        toolchain.install_go(),
        toolchain.install_pulumictl(),
        toolchain.install_pulumi_cli(opts.pulumi_cli_version),
        toolchain.install_schema_tools(),
        build.initialize_submodules(opts.submodules),
        build.build_codegen_binaries(not opts.skip_codegen),
        build.build_schema(),
        build.check_schema_changes(opts.provider_default_branch),
        build.comment_schema_changes_on_pr(),
        build.label_if_no_breaking_changes(),
        build.build_provider(),
        build.check_clean_worktree(),
        build.git_status(),
        build.tar_provider_binaries(),
        build.upload_provider_binaries(),
        build.test_provider_library(),
        build.codecov(),
        github.notify_slack("Failure in building provider prerequisites"),
    )


def build_sdks_job(opts: Options, tag: bool) -> JobBuilder:
    return (
        JobBuilder(BUILD_SDKS, runs_on=opts.large_runner)
        .depends_on(PREREQUISITES)
        .with_strategy(matrix("language", LANGUAGES))
        .with_step(
            checkout.checkout_repo(),
            checkout.checkout_scripts_repo(),
            checkout.checkout_tags(),
            toolchain.install_go(),
            toolchain.install_pulumictl(),
            toolchain.install_pulumi_cli(opts.pulumi_cli_version),
            toolchain.install_nodejs(),
            toolchain.install_dotnet(),
            toolchain.install_python(),
            toolchain.install_java(),
            toolchain.install_gradle(GRADLE_VERSION),
            build.download_provider_binaries(),
            build.untar_provider_binaries(),
            build.restore_binary_perms(),
            build.initialize_submodules(opts.submodules),
            build.generate_sdks(),
            build.build_sdks(),
            build.check_clean_worktree(),
            build.git_status(),
            build.zip_sdks(),
            build.upload_sdks(tag),
            github.notify_slack("Failure while building SDKs"),
        )
    )


def test_job(opts: Options) -> JobBuilder:
    infra = opts.test_infrastructure
    job = (
        JobBuilder(TEST, runs_on=opts.large_runner)
        .depends_on(BUILD_SDKS)
        .with_strategy(matrix("language", LANGUAGES))
        .with_permissions(**CLUSTER_PERMISSIONS)
        .with_step(
            checkout.checkout_repo(),
            checkout.checkout_scripts_repo(),
            checkout.checkout_tags(),
            toolchain.install_go(),
            toolchain.install_pulumictl(),
            toolchain.install_pulumi_cli(opts.pulumi_cli_version),
            toolchain.install_nodejs(),
            toolchain.install_dotnet(),
            toolchain.install_python(),
            toolchain.install_java(),
            toolchain.install_gradle(GRADLE_VERSION),
            build.download_provider_binaries(),
            build.untar_provider_binaries(),
            build.restore_binary_perms(),
            build.download_sdks(),
            build.unzip_sdks(),
            toolchain.update_path(),
            toolchain.install_node_deps(),
            toolchain.set_nuget_source(),
            toolchain.install_python_deps(),
            toolchain.install_sdk_deps(),
            cloud.make_kube_dir(infra),
            cloud.download_kubeconfig(infra),
            cloud.configure_aws_credentials_for_tests(opts.aws),
            cloud.google_auth(opts.gcp),
            cloud.setup_gcloud(opts.gcp),
            cloud.azure_login(opts.azure),
            cloud.install_kubectl(infra),
            cloud.install_and_configure_helm(infra),
            build.run_setup_script(opts.setup_script),
            build.run_docker_compose(opts.docker),
            toolchain.setup_gotestfmt(),
            build.run_tests(),
            github.notify_slack("Failure in SDK tests"),
        )
    )
    if infra:
        job.depends_on(BUILD_TEST_CLUSTER)
    return job


def build_test_cluster_job(opts: Options) -> JobBuilder:
    return (
        JobBuilder(BUILD_TEST_CLUSTER)
        .with_outputs(**{"stack-name": cloud.STACK_NAME_OUTPUT})
        .with_permissions(**CLUSTER_PERMISSIONS)
        .with_step(
            checkout.checkout_repo(),
            toolchain.install_go(),
            toolchain.install_pulumi_cli(opts.pulumi_cli_version),
            toolchain.install_nodejs(),
            cloud.google_auth(opts.gcp),
            cloud.setup_gcloud(opts.gcp),
            cloud.install_kubectl(True),
            cloud.login_google_cloud_registry(opts.gcp),
            cloud.set_stack_name(True),
            cloud.create_test_cluster(True),
            cloud.upload_kubernetes_artifacts(True),
        )
    )


def teardown_cluster_job(opts: Options) -> JobBuilder:
    """Always runs after the tests so the cluster is destroyed even on failure."""
    return (
        JobBuilder(TEARDOWN_CLUSTER)
        .depends_on(BUILD_TEST_CLUSTER, TEST)
        .with_condition("${{ always() }} && github.event.pull_request.head.repo.full_name == github.repository")
        .with_permissions(**CLUSTER_PERMISSIONS)
        .with_step(
            checkout.checkout_repo(),
            toolchain.install_go(),
            toolchain.install_pulumi_cli(opts.pulumi_cli_version),
            toolchain.install_nodejs(),
            cloud.google_auth(opts.gcp),
            cloud.setup_gcloud(opts.gcp),
            cloud.install_kubectl(True),
            cloud.login_google_cloud_registry(opts.gcp),
            cloud.destroy_test_cluster(True),
            cloud.delete_kubeconfig_artifact(True),
        )
    )


def lint_job(opts: Options) -> JobBuilder:
    return JobBuilder(LINT).with_step(
        checkout.checkout_repo(),
        toolchain.install_go(),
        lint.golangci_lint(opts.golangci_timeout),
    )


def _publish_steps(opts: Options, goreleaser_args: str) -> list:
    return [
        checkout.checkout_repo(),
        checkout.checkout_tags(),
        toolchain.install_go(),
        toolchain.install_pulumictl(),
        toolchain.install_pulumi_cli(opts.pulumi_cli_version),
        cloud.configure_aws_credentials_for_publish(),
        release.set_prerelease_version(),
        release.run_goreleaser(goreleaser_args),
        github.notify_slack("Failure in publishing binaries"),
    ]


def publish_prerelease_job(opts: Options) -> JobBuilder:
    args = (
        f"-p {opts.parallel} -f .goreleaser.prerelease.yml --rm-dist --skip-validate "
        f"--timeout {opts.timeout}m0s"
    )
    return (
        JobBuilder(PUBLISH, runs_on=opts.publish_runner)
        .depends_on(TEST)
        .with_step(*_publish_steps(opts, args))
    )


def publish_job(opts: Options) -> JobBuilder:
    args = f"-p {opts.parallel} release --rm-dist --timeout {opts.timeout}m0s"
    return (
        JobBuilder(PUBLISH, runs_on=opts.publish_runner)
        .depends_on(TEST)
        .with_step(*_publish_steps(opts, args))
    )


def publish_sdk_job(opts: Options) -> JobBuilder:
    return (
        JobBuilder(PUBLISH_SDK)
        .depends_on(PUBLISH)
        .with_step(
            checkout.checkout_repo(),
            checkout.checkout_scripts_repo(),
            checkout.checkout_tags(),
            toolchain.install_go(),
            toolchain.install_pulumictl(),
            toolchain.install_pulumi_cli(opts.pulumi_cli_version),
            toolchain.install_nodejs(),
            toolchain.install_dotnet(),
            toolchain.install_python(),
            release.download_specific_sdk("python"),
            release.unzip_specific_sdk("python"),
            release.download_specific_sdk("dotnet"),
            release.unzip_specific_sdk("dotnet"),
            release.download_specific_sdk("nodejs"),
            release.unzip_specific_sdk("nodejs"),
            toolchain.install_twine(),
            release.run_publish_sdk(),
            github.notify_slack("Failure in publishing SDK"),
        )
    )


def publish_java_sdk_job(opts: Options) -> JobBuilder:
    return (
        JobBuilder(PUBLISH_JAVA_SDK)
        .depends_on(PUBLISH)
        .allow_failure()
        .with_step(
            checkout.checkout_repo(),
            checkout.checkout_scripts_repo(),
            checkout.checkout_tags(),
            toolchain.install_go(),
            toolchain.install_pulumictl(),
            toolchain.install_pulumi_cli(opts.pulumi_cli_version),
            toolchain.install_java(),
            toolchain.install_gradle(GRADLE_VERSION),
            release.download_specific_sdk("java"),
            release.unzip_specific_sdk("java"),
            release.set_package_version_to_env(),
            release.run_publish_java_sdk(),
        )
    )


def tag_sdk_job() -> JobBuilder:
    return (
        JobBuilder(TAG_SDK)
        .depends_on(PUBLISH_SDK)
        .with_step(checkout.checkout_repo(), toolchain.install_pulumictl(), release.tag_sdk())
    )


def docs_build_dispatch_job() -> JobBuilder:
    return (
        JobBuilder(DISPATCH_DOCS_BUILD)
        .depends_on(TAG_SDK)
        .with_step(toolchain.install_pulumictl(), release.dispatch_docs_build())
    )


def weekly_update_job(opts: Options) -> JobBuilder:
    return JobBuilder("weekly-pulumi-update").with_step(
        checkout.checkout_repo(),
        checkout.checkout_tags(),
        toolchain.install_go(),
        toolchain.install_pulumictl(),
        toolchain.install_pulumi_cli(opts.pulumi_cli_version),
        toolchain.install_dotnet(),
        toolchain.install_nodejs(),
        toolchain.install_python(),
        maintenance.prepare_update_branch(),
        maintenance.update_pulumi(),
        build.initialize_submodules(opts.submodules),
        maintenance.provider_with_pulumi_upgrade(),
        maintenance.create_update_pulumi_pr(opts.provider_default_branch),
    )


def nightly_sdk_generation_job(opts: Options) -> JobBuilder:
    return JobBuilder("generate-sdk").with_step(
        checkout.checkout_repo(),
        # a shallow clone is enough when only regenerating from submodules
        checkout.checkout_tags(not opts.submodules),
        toolchain.install_go(GO_VERSION),
        toolchain.install_pulumictl(),
        toolchain.install_pulumi_cli(opts.pulumi_cli_version),
        cloud.configure_aws_credentials_for_tests(opts.aws),
        cloud.azure_login(opts.azure),
        maintenance.make_clean(),
        maintenance.prepare_sdk_generation_branch(),
        maintenance.commit_empty_sdk(),
        maintenance.update_submodules(opts.submodules),
        maintenance.make_discovery(opts.aws),
        build.build_codegen_binaries(not opts.skip_codegen),
        maintenance.make_local_generate(),
        maintenance.set_submodule_commit_hash(opts.submodules),
        maintenance.commit_automated_sdk_updates(),
        maintenance.pull_request_sdk_generation(opts.provider_default_branch),
        github.notify_slack("Failure during automated SDK generation"),
    )


def cf2pulumi_release_job() -> JobBuilder:
    return JobBuilder("release", runs_on="macos-11").with_step(
        checkout.checkout_repo(),
        checkout.checkout_tags(),
        toolchain.install_pulumictl(),
        toolchain.install_go(GO_VERSION),
        release.run_goreleaser("-p 1 -f .goreleaser.cf2pulumi.yml release --rm-dist --timeout 60m0s"),
        maintenance.chocolatey_package_deployment(),
    )


def arm2pulumi_release_job() -> JobBuilder:
    return JobBuilder("release", runs_on="macos-11").with_step(
        checkout.checkout_repo(),
        checkout.checkout_tags(),
        toolchain.install_pulumictl(),
        toolchain.install_go(GO_VERSION),
        maintenance.set_version_if_available(),
        release.run_goreleaser("-p 1 -f .goreleaser.arm2pulumi.yml release --rm-dist --timeout 60m0s"),
    )


def arm2pulumi_coverage_job(opts: Options) -> JobBuilder:
    return JobBuilder("generate-coverage").with_step(
        checkout.checkout_repo(),
        toolchain.install_go(GO_VERSION),
        toolchain.install_pulumictl(),
        toolchain.install_pulumi_cli(opts.pulumi_cli_version),
        cloud.azure_login(True),
        maintenance.make_clean(),
        build.initialize_submodules(True),
        build.build_codegen_binaries(True),
        maintenance.make_local_generate(),
        build.build_provider(),
        maintenance.generate_coverage_report(),
        maintenance.coverage_results_json(),
        maintenance.configure_aws_credentials_for_coverage_report(),
        maintenance.upload_coverage_to_s3(),
    )
