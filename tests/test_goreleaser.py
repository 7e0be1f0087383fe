from __future__ import annotations

from providerci.config import Options
from providerci.goreleaser import prerelease_config, release_config, version_ldflag


def test_version_ldflag_v1_has_no_major_suffix() -> None:
    opts = Options(provider="widget", major_version=1)
    assert version_ldflag(opts) == "-X github.com/pulumi/pulumi-widget/provider/pkg/version.Version={{.Tag}}"


def test_version_ldflag_adds_major_suffix() -> None:
    opts = Options(provider="kubernetes", major_version=4)
    assert version_ldflag(opts) == (
        "-X github.com/pulumi/pulumi-kubernetes/provider/v4/pkg/version.Version={{.Tag}}"
    )


def test_provider_version_overrides_symbol() -> None:
    opts = Options(provider="widget", major_version=3, provider_version="example.com/widget/version.Version")
    assert version_ldflag(opts) == "-X example.com/widget/version.Version={{.Tag}}"


def test_prerelease_config() -> None:
    config = prerelease_config(Options(provider="widget", custom_ld_flag="-X foo.Bar=baz"))
    doc = config.to_dict()
    assert doc["before"] == {"hooks": ["make codegen"]}
    assert doc["release"] == {"disable": True}
    assert doc["changelog"] == {"skip": True}
    assert doc["snapshot"] == {"name_template": "{{ .Tag }}-SNAPSHOT"}
    build = doc["builds"][0]
    assert build["binary"] == "pulumi-resource-widget"
    assert build["ldflags"][:2] == ["-s", "-w"]
    assert build["ldflags"][-1] == "-X foo.Bar=baz"
    assert "ignore" not in build
    assert doc["blobs"][0]["provider"] == "s3"


def test_skip_codegen_drops_before_hook() -> None:
    doc = prerelease_config(Options(provider="widget", skip_codegen=True)).to_dict()
    assert "before" not in doc


def test_skip_windows_arm_build() -> None:
    doc = release_config(Options(provider="widget", skip_windows_arm_build=True)).to_dict()
    assert doc["builds"][0]["ignore"] == [{"goos": "windows", "goarch": "arm64"}]


def test_release_config_enables_github_release() -> None:
    opts = Options(provider="widget")
    doc = release_config(opts).to_dict()
    assert doc["release"] == {"disable": False, "prerelease": "auto"}
    assert doc["changelog"]["use"] == "git"
    assert doc["builds"] == prerelease_config(opts).to_dict()["builds"]
