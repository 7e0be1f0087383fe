# config.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr, ValidationError

from . import settings
from .errors import OptionsValidationError, UnknownProviderError

ExtraWorkflow = Literal[
    "nightly-sdk-generation",
    "cf2pulumi-release",
    "arm2pulumi-release",
    "arm2pulumi-coverage-report",
]


class Options(BaseModel):
    """
    Per-provider generator options, as read from providers/<name>/config.yaml.

    Aliases match the keys used in existing config files; attribute names
    are accepted too so tests and callers can build Options directly.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    provider: StrictStr
    provider_default_branch: StrictStr = Field(default="master", alias="provider-default-branch")
    golangci_timeout: StrictStr = Field(default="20m", alias="golangci-timeout")
    major_version: StrictInt = Field(default=0, ge=0, alias="major-version")
    custom_ld_flag: StrictStr = Field(default="", alias="customLdFlag")
    skip_windows_arm_build: StrictBool = Field(default=False, alias="skipWindowsArmBuild")

    env: Optional[Dict[str, Any]] = None
    docker: StrictBool = False
    aws: StrictBool = False
    gcp: StrictBool = False
    azure: StrictBool = False
    submodules: StrictBool = False
    lint: StrictBool = True
    setup_script: Optional[StrictStr] = Field(default=None, alias="setup-script")
    parallel: StrictInt = Field(default=3, ge=1)
    timeout: StrictInt = Field(default=60, ge=1)
    provider_version: StrictStr = Field(default="", alias="providerVersion")
    skip_codegen: StrictBool = Field(default=False, alias="skipCodegen")
    pulumi_cli_version: Optional[StrictStr] = Field(default=None, alias="pulumiCLIVersion")

    # capability flag: provider needs a dedicated test cluster provisioned around its tests
    test_infrastructure: StrictBool = Field(default=False, alias="test-infrastructure")
    large_runner: StrictStr = Field(default="pulumi-ubuntu-8core", alias="large-runner")
    publish_runner: StrictStr = Field(default="ubuntu-latest", alias="publish-runner")
    additional_branches: List[StrictStr] = Field(default_factory=list, alias="additional-branches")
    extra_workflows: List[ExtraWorkflow] = Field(default_factory=list, alias="extra-workflows")


def parse_options(raw: Any, *, provider: Optional[str] = None) -> Options:
    """
    Validate an untyped config document into Options.

    Raises:
        OptionsValidationError: naming the first offending field.
    """
    if not isinstance(raw, dict):
        raise OptionsValidationError(
            "<root>",
            f"expected a mapping, got {type(raw).__name__}",
            provider=provider,
        )
    try:
        return Options.model_validate(raw)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        first = errors[0]
        loc = ".".join(str(p) for p in first["loc"]) or "<root>"
        raise OptionsValidationError(
            loc,
            first["msg"],
            provider=provider or raw.get("provider"),
            errors=[
                {"field": ".".join(str(p) for p in err["loc"]), "reason": err["msg"]}
                for err in errors
            ],
        ) from e


def config_path(provider: str, providers_dir: str | Path | None = None) -> Path:
    root = Path(providers_dir if providers_dir is not None else settings.PROVIDERS_DIR)
    return root / provider / settings.CONFIG_FILE


def load_options(provider: str, providers_dir: str | Path | None = None) -> Options:
    """
    Load and validate providers/<provider>/config.yaml.

    Raises:
        UnknownProviderError: if the provider has no config file
        OptionsValidationError: if the file is not valid YAML or fails the schema
    """
    path = config_path(provider, providers_dir)
    if not path.is_file():
        raise UnknownProviderError(provider, str(path))

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise OptionsValidationError("<document>", f"invalid encoding: {e}", provider=provider) from e
    except yaml.YAMLError as e:
        raise OptionsValidationError("<document>", f"invalid YAML: {e}", provider=provider) from e

    return parse_options(raw, provider=provider)


def list_providers(providers_dir: str | Path | None = None) -> List[str]:
    """Names of provider directories that carry a config file, sorted."""
    root = Path(providers_dir if providers_dir is not None else settings.PROVIDERS_DIR)
    if not root.is_dir():
        return []
    return sorted(p.name for p in root.iterdir() if (p / settings.CONFIG_FILE).is_file())
