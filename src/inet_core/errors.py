from __future__ import annotations

from dataclasses import dataclass


class NetError(Exception):
    """Base for every error raised by inet_core and pnet_core."""


@dataclass(frozen=True)
class ParseError(NetError, ValueError):
    message: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        where = []
        if self.line is not None:
            where.append(f"line {self.line}")
        if self.column is not None:
            where.append(f"column {self.column}")
        if not where:
            return self.message
        return f"{self.message} ({', '.join(where)})"


@dataclass(frozen=True)
class UnsupportedTreeShape(NetError, ValueError):
    shape: str

    def __str__(self) -> str:
        return f"unsupported tree shape: {self.shape}"


@dataclass(frozen=True)
class VariableOveruse(NetError, ValueError):
    name: str

    def __str__(self) -> str:
        return f"variable {self.name!r} used more than twice"


@dataclass(frozen=True)
class UnpairedVariable(NetError, ValueError):
    name: str

    def __str__(self) -> str:
        return f"variable {self.name!r} used only once"


@dataclass(frozen=True)
class IndexOutOfRange(NetError, IndexError):
    kind: str
    index: int
    bound: int

    def __str__(self) -> str:
        return f"{self.kind} {self.index} out of range (bound {self.bound})"


@dataclass(frozen=True)
class AuxOnNullaryNode(NetError, ValueError):
    node: int

    def __str__(self) -> str:
        return f"node {self.node} has no auxiliary ports"


@dataclass(frozen=True)
class InvariantViolation(NetError, RuntimeError):
    message: str
    context: str | None = None

    def __str__(self) -> str:
        if self.context is None:
            return self.message
        return f"{self.context}: {self.message}"


@dataclass(frozen=True)
class NetConfigError(NetError, ValueError):
    message: str
    context: str | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class PathConfigError(NetError, ValueError):
    message: str
    labels: object = None

    def __str__(self) -> str:
        return self.message


__all__ = [
    "NetError",
    "ParseError",
    "UnsupportedTreeShape",
    "VariableOveruse",
    "UnpairedVariable",
    "IndexOutOfRange",
    "AuxOnNullaryNode",
    "InvariantViolation",
    "NetConfigError",
    "PathConfigError",
]
