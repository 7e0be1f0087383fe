from __future__ import annotations

from providerci.model import INERT
from providerci.step_workflows import build, checkout, cloud, lint, release, toolchain


def test_flagged_steps_are_inert_when_disabled() -> None:
    assert build.initialize_submodules(False) is INERT
    assert build.build_codegen_binaries(False) is INERT
    assert build.run_setup_script(None) is INERT
    assert build.run_docker_compose(False) is INERT
    assert checkout.checkout_tags(False) is INERT
    assert cloud.configure_aws_credentials_for_tests(False) is INERT
    assert cloud.google_auth(False) is INERT
    assert cloud.setup_gcloud(False) is INERT
    assert cloud.azure_login(False) is INERT
    assert cloud.install_kubectl(False) is INERT
    assert cloud.create_test_cluster(False) is INERT
    assert INERT.inert


def test_flagged_steps_are_active_when_enabled() -> None:
    assert build.initialize_submodules(True).run == "make init_submodules"
    assert build.run_setup_script("./scripts/setup.sh").run == "./scripts/setup.sh"
    assert cloud.configure_aws_credentials_for_tests(True).uses.startswith("aws-actions/")
    assert not cloud.google_auth(True).inert


def test_pulumi_cli_pin_is_optional() -> None:
    assert toolchain.install_pulumi_cli().with_ is None
    assert toolchain.install_pulumi_cli("3.80.0").with_ == {"pulumi-version": "3.80.0"}


def test_install_go_defaults_to_env_version() -> None:
    assert toolchain.install_go().with_["go-version"] == "${{ env.GOVERSION }}"
    assert toolchain.install_go("1.21.x").with_["go-version"] == "1.21.x"


def test_schema_check_compares_against_default_branch() -> None:
    step = build.check_schema_changes("main")
    assert "schema-tools compare ${{ env.PROVIDER }} main --json" in step.run


def test_golangci_lint_timeout() -> None:
    assert lint.golangci_lint("30m").with_["args"] == "-c ../.golangci.yml --timeout 30m"


def test_specific_sdk_steps_name_the_language() -> None:
    assert release.download_specific_sdk("java").with_["name"] == "java-sdk.tar.gz"
    assert release.unzip_specific_sdk("java").run == (
        "tar -zxf ${{github.workspace}}/sdk/java.tar.gz -C ${{github.workspace}}/sdk/java"
    )


def test_upload_sdks_retention_depends_on_tag() -> None:
    assert build.upload_sdks(True).with_["retention-days"] == 30
    assert build.upload_sdks(False).with_["retention-days"] == 5
