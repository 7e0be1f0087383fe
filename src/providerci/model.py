# model.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union


def _compact(pairs: list[tuple[str, Any]]) -> Dict[str, Any]:
    # GitHub treats a missing key and a null key differently in places; emit neither
    return {k: v for k, v in pairs if v is not None}


@dataclass(frozen=True)
class Step:
    """
    A single step inside a GitHub Actions job.

    `name` is the identifier used when filtering steps (e.g. swapping the
    checkout step for dispatch runs). A step with neither `uses` nor `run`
    is inert and never makes it into a built Job.
    """
    name: str = ""
    uses: Optional[str] = None
    run: Optional[str] = None
    id: Optional[str] = None
    if_: Optional[str] = None
    with_: Optional[Mapping[str, Any]] = None
    env: Optional[Mapping[str, Any]] = None
    working_directory: Optional[str] = None

    @property
    def inert(self) -> bool:
        return self.uses is None and self.run is None

    def to_dict(self) -> Dict[str, Any]:
        return _compact([
            ("name", self.name or None),
            ("id", self.id),
            ("if", self.if_),
            ("uses", self.uses),
            ("run", self.run),
            ("with", dict(self.with_) if self.with_ else None),
            ("env", dict(self.env) if self.env else None),
            ("working-directory", self.working_directory),
        ])


# Shared no-op step returned by catalog factories whose feature flag is off.
INERT = Step()


@dataclass(frozen=True)
class Job:
    """
    A node in a workflow's dependency graph.

    `needs` holds the names of jobs (in the same workflow) that must finish
    before this one starts.
    """
    name: str
    runs_on: str
    steps: Tuple[Step, ...]
    needs: Tuple[str, ...] = ()
    if_: Optional[str] = None
    outputs: Optional[Mapping[str, str]] = None
    strategy: Optional[Mapping[str, Any]] = None
    permissions: Optional[Mapping[str, str]] = None
    continue_on_error: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact([
            ("name", self.name),
            ("runs-on", self.runs_on),
            ("needs", list(self.needs) if self.needs else None),
            ("if", self.if_),
            ("continue-on-error", self.continue_on_error),
            ("permissions", dict(self.permissions) if self.permissions else None),
            ("outputs", dict(self.outputs) if self.outputs else None),
            ("strategy", _plain(self.strategy) if self.strategy else None),
            ("steps", [s.to_dict() for s in self.steps]),
        ])


@dataclass(frozen=True)
class Workflow:
    """A named GitHub Actions workflow: triggers, shared env and a job mapping."""
    name: str
    on: Mapping[str, Any]
    env: Mapping[str, Any] = field(default_factory=dict)
    jobs: Mapping[str, Job] = field(default_factory=dict)

    def needs_of(self, job_name: str) -> Tuple[str, ...]:
        return self.jobs[job_name].needs

    def to_dict(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {"name": self.name, "on": _plain(self.on)}
        if self.env:
            doc["env"] = dict(self.env)
        doc["jobs"] = {key: job.to_dict() for key, job in self.jobs.items()}
        return doc


@dataclass
class GoreleaserConfig:
    """Release-tool configuration; no job graph, just build/archive/publish targets."""
    builds: list[Dict[str, Any]]
    archives: list[Dict[str, Any]]
    snapshot: Dict[str, Any]
    changelog: Dict[str, Any]
    release: Dict[str, Any]
    before: Optional[Dict[str, Any]] = None
    blobs: Optional[list[Dict[str, Any]]] = None

    def to_dict(self) -> Dict[str, Any]:
        return _plain(_compact([
            ("archives", self.archives),
            ("before", self.before),
            ("blobs", self.blobs),
            ("builds", self.builds),
            ("changelog", self.changelog),
            ("release", self.release),
            ("snapshot", self.snapshot),
        ]))


Document = Union[Workflow, GoreleaserConfig]


@dataclass(frozen=True)
class ProviderFile:
    """One generated output: a repo-relative POSIX path and the document to write there."""
    path: str
    data: Document


def _plain(value: Any) -> Any:
    """Deep-copy mappings/sequences into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
