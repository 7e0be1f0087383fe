# errors.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class GeneratorError(Exception):
    """
    Structured generator error with enough context for:
      - clean CLI output
      - attributing the failure to one provider
      - debugging without full tracebacks
    """
    kind: str
    provider: Optional[str]
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}"]
        if self.provider:
            lines.append(f"provider={self.provider}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


class OptionsValidationError(GeneratorError):
    """A provider config document failed schema validation."""

    def __init__(
        self,
        field: str,
        reason: str,
        *,
        provider: Optional[str] = None,
        errors: Optional[list] = None,
    ):
        details: Dict[str, Any] = {"field": field, "reason": reason}
        if errors:
            details["errors"] = errors
        super().__init__(
            kind="validation",
            provider=provider,
            message=f"invalid value for '{field}': {reason}",
            details=details,
        )
        self.field = field
        self.reason = reason


class UnknownProviderError(GeneratorError):
    """No configuration document exists for the requested provider."""

    def __init__(self, provider: str, config_path: str):
        super().__init__(
            kind="unknown_provider",
            provider=provider,
            message=f"no configuration found for provider '{provider}'",
            details={"path": config_path},
        )


class UnresolvedDependencyError(GeneratorError):
    """A job names a dependency that is not a job in the same workflow."""

    def __init__(self, workflow: str, job: str, missing: str, known: list[str]):
        super().__init__(
            kind="unresolved_dependency",
            provider=None,
            message=f"job '{job}' needs missing job '{missing}'",
            details={"workflow": workflow, "job": job, "missing": missing, "known": sorted(known)},
        )
        self.workflow = workflow
        self.job = job
        self.missing = missing
