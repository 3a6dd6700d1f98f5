from __future__ import annotations

from dataclasses import dataclass

from inet_core.domains import IdDomain, _coerce_id


@dataclass(frozen=True, repr=False)
class BranchId(IdDomain):
    pass


@dataclass(frozen=True, repr=False)
class AgentPathId(IdDomain):
    pass


@dataclass(frozen=True, repr=False)
class PathId(IdDomain):
    pass


ROOT_BRANCH = BranchId(0)


def _branch_id(value) -> BranchId:
    return _coerce_id(value, BranchId)


def _agent_path_id(value) -> AgentPathId:
    return _coerce_id(value, AgentPathId)


def _path_id(value) -> PathId:
    return _coerce_id(value, PathId)


__all__ = [
    "BranchId",
    "AgentPathId",
    "PathId",
    "ROOT_BRANCH",
    "_branch_id",
    "_agent_path_id",
    "_path_id",
]
