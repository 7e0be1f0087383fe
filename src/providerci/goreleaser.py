# goreleaser.py
# GoReleaser configs for the provider plugin binary.
from __future__ import annotations

from typing import List

from .config import Options
from .model import GoreleaserConfig

PLUGIN_BUCKET = "get.pulumi.com"
PLUGIN_FOLDER = "releases/plugins/"


def version_ldflag(opts: Options) -> str:
    """-X flag stamping the release tag into the provider's version package."""
    if opts.provider_version:
        symbol = opts.provider_version
    else:
        major = f"/v{opts.major_version}" if opts.major_version > 1 else ""
        symbol = f"github.com/pulumi/pulumi-{opts.provider}/provider{major}/pkg/version.Version"
    return f"-X {symbol}={{{{.Tag}}}}"


def _ldflags(opts: Options) -> List[str]:
    flags = ["-s", "-w", version_ldflag(opts)]
    if opts.custom_ld_flag:
        flags.append(opts.custom_ld_flag)
    return flags


def _builds(opts: Options) -> list:
    ignore = [{"goos": "windows", "goarch": "arm64"}] if opts.skip_windows_arm_build else []
    build = {
        "binary": f"pulumi-resource-{opts.provider}",
        "dir": "provider",
        "env": ["CGO_ENABLED=0", "GO111MODULE=on"],
        "goarch": ["amd64", "arm64"],
        "goos": ["darwin", "windows", "linux"],
        "ldflags": _ldflags(opts),
        "main": f"./cmd/pulumi-resource-{opts.provider}/",
    }
    if ignore:
        build["ignore"] = ignore
    return [build]


def prerelease_config(opts: Options) -> GoreleaserConfig:
    """
    Config for `.goreleaser.prerelease.yml`.

    Prerelease tags carry a suffix, so snapshot naming is used and the
    GitHub release and changelog are skipped; binaries still go to the
    plugin bucket.
    """
    return GoreleaserConfig(
        before=None if opts.skip_codegen else {"hooks": ["make codegen"]},
        builds=_builds(opts),
        archives=[
            {
                "id": "archive",
                "name_template": "{{ .Binary }}-{{ .Tag }}-{{ .Os }}-{{ .Arch }}",
            }
        ],
        snapshot={"name_template": "{{ .Tag }}-SNAPSHOT"},
        changelog={"skip": True},
        release={"disable": True},
        blobs=[
            {
                "bucket": PLUGIN_BUCKET,
                "folder": PLUGIN_FOLDER,
                "ids": ["archive"],
                "provider": "s3",
                "region": "us-west-2",
            }
        ],
    )


def release_config(opts: Options) -> GoreleaserConfig:
    """Config for `.goreleaser.yml`: same builds, plus a GitHub release with changelog."""
    config = prerelease_config(opts)
    config.release = {"disable": False, "prerelease": "auto"}
    config.changelog = {
        "skip": False,
        "use": "git",
        "filters": {"exclude": ["Merge branch", "Merge pull request"]},
    }
    return config
