# dag.py
# Opt-in consistency check for generated workflows. Construction never
# calls this; tests and `providerci generate --check` do.
from __future__ import annotations

from typing import Dict, List, Set, Tuple

from .errors import GeneratorError, UnresolvedDependencyError
from .model import Workflow


def build_dag(workflow: Workflow) -> Tuple[Dict[str, Set[str]], Dict[str, int]]:
    """
    Build the job graph of one workflow.

    Returns (adj, indeg) where adj maps a job key to the jobs that need it
    and indeg counts each job's distinct needs.

    Raises:
        UnresolvedDependencyError: if a job needs a key the workflow lacks
    """
    keys = set(workflow.jobs)
    adj: Dict[str, Set[str]] = {k: set() for k in keys}
    indeg: Dict[str, int] = dict.fromkeys(keys, 0)

    for key, job in workflow.jobs.items():
        for need in job.needs:
            if need not in keys:
                raise UnresolvedDependencyError(workflow.name, key, need, list(keys))
            if key in adj[need]:
                continue
            adj[need].add(key)
            indeg[key] += 1

    return adj, indeg


def topo_levels(adj: Dict[str, Set[str]], indeg: Dict[str, int]) -> List[List[str]]:
    """
    Group jobs into stages. Each stage only needs jobs from earlier stages;
    names inside a stage are sorted so the result is stable.
    """
    pending = dict(indeg)
    frontier = sorted(k for k, d in pending.items() if d == 0)
    levels: List[List[str]] = []

    while frontier:
        levels.append(frontier)
        released: Set[str] = set()
        for key in frontier:
            del pending[key]
            for child in adj.get(key, ()):
                pending[child] -= 1
                if pending[child] == 0:
                    released.add(child)
        frontier = sorted(released)

    if pending:
        raise GeneratorError(
            kind="dependency_cycle",
            provider=None,
            message="job dependencies form a cycle",
            details={"stuck": sorted(pending)},
        )

    return levels


def check_workflow(workflow: Workflow) -> List[List[str]]:
    """Resolve every need and return the stages."""
    adj, indeg = build_dag(workflow)
    return topo_levels(adj, indeg)
