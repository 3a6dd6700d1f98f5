from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class IdDomain:
    """Integer id tagged with the arena it indexes."""

    i: int

    def __int__(self) -> int:
        return int(self.i)

    def __index__(self) -> int:
        return int(self.i)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.i})"


@dataclass(frozen=True, repr=False)
class NodeId(IdDomain):
    pass


def _coerce_id(value, cls):
    if isinstance(value, cls):
        return value
    if isinstance(value, IdDomain):
        raise TypeError(
            f"expected {cls.__name__}, got {type(value).__name__}"
        )
    if isinstance(value, bool):
        raise TypeError(f"expected {cls.__name__}, got bool")
    return cls(operator.index(value))


def _node_id(value) -> NodeId:
    return _coerce_id(value, NodeId)


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


def _side(value) -> Side:
    if isinstance(value, Side):
        return value
    if value == Side.LEFT.value:
        return Side.LEFT
    if value == Side.RIGHT.value:
        return Side.RIGHT
    raise ValueError(f"unknown side={value!r}")


@dataclass(frozen=True)
class FreePort:
    """External slot of the net, one per top-level tree."""

    index: int


@dataclass(frozen=True)
class NodeSlot:
    """Left or right auxiliary slot of an agent node."""

    node: NodeId
    side: Side

    def __post_init__(self):
        object.__setattr__(self, "node", _node_id(self.node))
        object.__setattr__(self, "side", _side(self.side))


AuxPort = Union[FreePort, NodeSlot]


@dataclass(frozen=True)
class Principal:
    node: NodeId

    def __post_init__(self):
        object.__setattr__(self, "node", _node_id(self.node))


@dataclass(frozen=True)
class Aux:
    port: AuxPort

    def __post_init__(self):
        if not isinstance(self.port, (FreePort, NodeSlot)):
            raise TypeError(
                f"Aux expects FreePort or NodeSlot, got {type(self.port).__name__}"
            )


Port = Union[Principal, Aux]


def left_of(node) -> NodeSlot:
    return NodeSlot(_node_id(node), Side.LEFT)


def right_of(node) -> NodeSlot:
    return NodeSlot(_node_id(node), Side.RIGHT)


__all__ = [
    "IdDomain",
    "NodeId",
    "Side",
    "FreePort",
    "NodeSlot",
    "AuxPort",
    "Principal",
    "Aux",
    "Port",
    "left_of",
    "right_of",
    "_coerce_id",
    "_node_id",
    "_side",
]
