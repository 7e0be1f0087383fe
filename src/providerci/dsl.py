# src/providerci/dsl.py
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .model import Job, Step, Workflow


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def _copy(mapping: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
    # steps own their mappings
    return dict(mapping) if mapping is not None else None


def sh(
    name: str,
    cmd: str,
    *,
    id: str | None = None,
    if_: str | None = None,
    env: Optional[Mapping[str, Any]] = None,
    cwd: str | None = None,
) -> Step:
    """Create a shell step."""
    return Step(name=name, run=cmd, id=id, if_=if_, env=_copy(env), working_directory=cwd)


def uses(
    name: str,
    action: str,
    *,
    with_: Optional[Mapping[str, Any]] = None,
    id: str | None = None,
    if_: str | None = None,
    env: Optional[Mapping[str, Any]] = None,
) -> Step:
    """Create a step that runs an external action."""
    return Step(name=name, uses=action, with_=_copy(with_), id=id, if_=if_, env=_copy(env))


def active_steps(steps: Iterable[Step]) -> List[Step]:
    """Drop inert steps, keeping order."""
    return [s for s in steps if not s.inert]


# ---------------------------------------------------------------------
# Builder API
# ---------------------------------------------------------------------

CHECKOUT_STEP_NAME = "Checkout Repo"

DISPATCH_CONDITION = (
    "github.event_name == 'repository_dispatch' || "
    "github.event.pull_request.head.repo.full_name == github.repository"
)


class JobBuilder:
    """
    Incrementally refine a job, then freeze it with build().

    Every refinement returns the builder so calls can be chained:

        JobBuilder("lint").with_step(checkout_repo()).depends_on("prerequisites").build()
    """

    def __init__(self, name: str, runs_on: str = "ubuntu-latest"):
        self.name = name
        self._runs_on = runs_on
        self._steps: list[Step] = []
        self._needs: list[str] = []
        self._if: Optional[str] = None
        self._outputs: Optional[dict[str, str]] = None
        self._strategy: Optional[dict[str, Any]] = None
        self._permissions: Optional[dict[str, str]] = None
        self._continue_on_error: Optional[bool] = None

    @property
    def steps(self) -> list[Step]:
        return list(self._steps)

    @property
    def needs(self) -> list[str]:
        return list(self._needs)

    def with_step(self, *steps: Step):
        self._steps.extend(steps)
        return self

    def with_condition(self, condition: str):
        self._if = condition
        return self

    def with_runner(self, runs_on: str):
        self._runs_on = runs_on
        return self

    def depends_on(self, *job_names: str):
        for name in job_names:
            if name not in self._needs:
                self._needs.append(name)
        return self

    def with_strategy(self, strategy: Mapping[str, Any]):
        self._strategy = dict(strategy)
        return self

    def with_outputs(self, **outputs: str):
        self._outputs = {**(self._outputs or {}), **outputs}
        return self

    def with_permissions(self, **permissions: str):
        # id_token -> id-token
        perms = {k.replace("_", "-"): v for k, v in permissions.items()}
        self._permissions = {**(self._permissions or {}), **perms}
        return self

    def allow_failure(self, enabled: bool = True):
        self._continue_on_error = enabled
        return self

    def for_dispatch(self, is_dispatch: bool, *, guard: bool = True):
        """
        Adapt the job to run for a dispatched (slash command / same-repo PR) event.

        The generic checkout is replaced by a checkout of the PR commit, never
        kept alongside it. With guard=False the job's own condition is kept.
        """
        if not is_dispatch:
            return self
        # Import here to avoid circular import
        from .step_workflows.checkout import checkout_repo_at_pr

        if guard:
            self._if = DISPATCH_CONDITION
        self._steps = [s for s in self._steps if s.name != CHECKOUT_STEP_NAME]
        self._steps.insert(0, checkout_repo_at_pr())
        return self

    def build(self) -> Job:
        return Job(
            name=self.name,
            runs_on=self._runs_on,
            steps=tuple(active_steps(self._steps)),
            needs=tuple(self._needs),
            if_=self._if,
            outputs=self._outputs,
            strategy=self._strategy,
            permissions=self._permissions,
            continue_on_error=self._continue_on_error,
        )


def build(name: str, runs_on: str = "ubuntu-latest") -> JobBuilder:
    """Convenience: build('test').with_step(...).build()"""
    return JobBuilder(name, runs_on)


# ---------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------

def matrix(key: str, values: Iterable[Any], *, fail_fast: bool = True) -> Dict[str, Any]:
    """
    Fan-out strategy over one dimension.

    Example:
        JobBuilder("test").with_strategy(matrix("language", ["nodejs", "go"]))
    """
    return {"fail-fast": fail_fast, "matrix": {key: list(values)}}


# ---------------------------------------------------------------------
# Workflow helper
# ---------------------------------------------------------------------

def workflow(
    name: str,
    on: Mapping[str, Any],
    *jobs: Union[Job, JobBuilder],
    env: Optional[Mapping[str, Any]] = None,
) -> Workflow:
    """
    Assemble jobs into a Workflow keyed by job name.

    Builders are built here; job names must be unique.
    """
    mapping: Dict[str, Job] = {}
    for j in jobs:
        built = j.build() if isinstance(j, JobBuilder) else j
        if built.name in mapping:
            raise ValueError(f"Duplicate job name in workflow {name!r}: {built.name!r}")
        mapping[built.name] = built
    return Workflow(name=name, on=dict(on), env=dict(env or {}), jobs=mapping)
