"""Interaction-net graph: node arena, free ports, text conversion.

Every node lives in ``InteractionNet.nodes`` under a stable integer id and is
never removed. A wire is two auxiliary slots holding each other's identity;
a principal port is recorded on its node as the auxiliary slot it faces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from inet_core import metrics as _metrics
from inet_core.config import (
    DEFAULT_NET_CONFIG,
    NetConfig,
    resolve_parse_fn,
    resolve_render_fn,
    resolve_wire_guard,
)
from inet_core.domains import (
    Aux,
    AuxPort,
    FreePort,
    NodeId,
    NodeSlot,
    Port,
    Principal,
    Side,
    _node_id,
    left_of,
    right_of,
)
from inet_core.errors import (
    AuxOnNullaryNode,
    IndexOutOfRange,
    InvariantViolation,
    ParseError,
    UnpairedVariable,
    UnsupportedTreeShape,
    VariableOveruse,
)
from inet_core.guards import validate_wires
from inet_core.tree import LABEL_MAX, Ctr, Era, Tree, Var, tree_shape


@dataclass(slots=True)
class EraNode:
    endpoint: AuxPort


@dataclass(slots=True)
class AgentNode:
    label: int
    principal: AuxPort
    # None only while the node is under construction.
    left: Optional[Port] = None
    right: Optional[Port] = None


Node = Union[EraNode, AgentNode]


def name_gen() -> Iterator[str]:
    """Yield a, b, ..., z, aa, ab, ... (bijective base 26)."""
    i = 0
    while True:
        n = i + 1
        chars = []
        while n > 0:
            n, rem = divmod(n - 1, 26)
            chars.append(chr(ord("a") + rem))
        yield "".join(reversed(chars))
        i += 1


@dataclass
class _WireTable:
    # name -> (first occurrence, second occurrence or None)
    sites: Dict[str, Tuple[AuxPort, Optional[AuxPort]]] = field(default_factory=dict)
    linked: int = 0


@dataclass
class InteractionNet:
    nodes: List[Node] = field(default_factory=list)
    free_ports: List[Optional[Port]] = field(default_factory=list)

    # Construction

    @classmethod
    def from_text(cls, text: str, *, cfg: NetConfig = DEFAULT_NET_CONFIG) -> "InteractionNet":
        parse_fn = resolve_parse_fn(cfg)
        trees = []
        for lineno, line in enumerate(text.split("\n"), start=1):
            line = line.rstrip("\r")
            if not line.strip():
                continue
            try:
                trees.append(parse_fn(line))
            except ParseError as err:
                raise ParseError(err.message, line=lineno, column=err.column) from err
        return cls.from_trees(trees, cfg=cfg)

    @classmethod
    def from_trees(
        cls, trees: Iterable[Tree], *, cfg: NetConfig = DEFAULT_NET_CONFIG
    ) -> "InteractionNet":
        net = cls()
        wires = _WireTable()
        for tree in trees:
            net.free_ports.append(None)
            slot = FreePort(len(net.free_ports) - 1)
            net._add_tree(tree, slot, wires)
        for name, (_, second) in wires.sites.items():
            if second is None:
                raise UnpairedVariable(name)
        if resolve_wire_guard(cfg):
            validate_wires(net, context="InteractionNet.from_trees")
        _metrics._net_metrics_update(len(net.nodes), wires.linked)
        return net

    def _alloc(self, node: Node) -> NodeId:
        self.nodes.append(node)
        return NodeId(len(self.nodes) - 1)

    def _add_tree(self, tree: Tree, parent: AuxPort, wires: _WireTable) -> None:
        # Preorder, left before right, so node ids follow the text.
        todo: List[Tuple[Tree, AuxPort]] = [(tree, parent)]
        while todo:
            tree, parent = todo.pop()
            if isinstance(tree, Era):
                node_id = self._alloc(EraNode(parent))
                self.write(parent, Principal(node_id))
            elif isinstance(tree, Ctr):
                if not 0 <= tree.lab <= LABEL_MAX:
                    raise IndexOutOfRange("label", tree.lab, LABEL_MAX + 1)
                node_id = self._alloc(AgentNode(tree.lab, parent))
                self.write(parent, Principal(node_id))
                todo.append((tree.rgt, right_of(node_id)))
                todo.append((tree.lft, left_of(node_id)))
            elif isinstance(tree, Var):
                self._add_var(tree.name, parent, wires)
            else:
                raise UnsupportedTreeShape(tree_shape(tree))

    def _add_var(self, name: str, parent: AuxPort, wires: _WireTable) -> None:
        site = wires.sites.get(name)
        if site is None:
            wires.sites[name] = (parent, None)
            return
        first, second = site
        if second is not None:
            raise VariableOveruse(name)
        wires.sites[name] = (first, parent)
        self.link(first, parent)
        wires.linked += 1

    def link(self, a: AuxPort, b: AuxPort) -> None:
        """Wire two auxiliary slots to each other."""
        # Both slots must resolve before either is written.
        self.read_aux(a)
        self.read_aux(b)
        self.write(a, Aux(b))
        self.write(b, Aux(a))

    # Port primitives

    def node(self, node_id) -> Node:
        idx = int(_node_id(node_id))
        if not 0 <= idx < len(self.nodes):
            raise IndexOutOfRange("node", idx, len(self.nodes))
        return self.nodes[idx]

    def _agent(self, slot: NodeSlot) -> AgentNode:
        node = self.node(slot.node)
        if isinstance(node, EraNode):
            raise AuxOnNullaryNode(int(slot.node))
        return node

    def _free_index(self, slot: FreePort) -> int:
        if not 0 <= slot.index < len(self.free_ports):
            raise IndexOutOfRange("free port", slot.index, len(self.free_ports))
        return slot.index

    def read_aux(self, slot: AuxPort) -> Optional[Port]:
        if isinstance(slot, FreePort):
            return self.free_ports[self._free_index(slot)]
        agent = self._agent(slot)
        return agent.left if slot.side is Side.LEFT else agent.right

    def read(self, port: Port) -> Optional[Port]:
        """Resolve a port value to what it is wired to."""
        if isinstance(port, Principal):
            node = self.node(port.node)
            if isinstance(node, EraNode):
                return Aux(node.endpoint)
            return Aux(node.principal)
        return self.read_aux(port.port)

    def write(self, slot: AuxPort, value: Optional[Port]) -> Optional[Port]:
        """Overwrite an auxiliary slot, returning what it held before."""
        if isinstance(slot, FreePort):
            idx = self._free_index(slot)
            previous = self.free_ports[idx]
            self.free_ports[idx] = value
            return previous
        agent = self._agent(slot)
        if slot.side is Side.LEFT:
            previous, agent.left = agent.left, value
        else:
            previous, agent.right = agent.right, value
        return previous

    def aux_slots(self) -> Iterator[AuxPort]:
        for i in range(len(self.free_ports)):
            yield FreePort(i)
        for i, node in enumerate(self.nodes):
            if isinstance(node, AgentNode):
                yield left_of(i)
                yield right_of(i)

    # Serialization

    def to_trees(self) -> List[Tree]:
        names: Dict[AuxPort, str] = {}
        fresh = name_gen()
        return [self._to_tree(port, names, fresh) for port in self.free_ports]

    def to_text(self, *, cfg: NetConfig = DEFAULT_NET_CONFIG) -> str:
        render_fn = resolve_render_fn(cfg)
        return "\n".join(render_fn(tree) for tree in self.to_trees())

    def _to_tree(self, port: Optional[Port], names: Dict[AuxPort, str], fresh) -> Tree:
        # ("port", value) entries expand; ("ctr", label) entries pop two subtrees.
        todo: list = [("port", port)]
        done: List[Tree] = []
        while todo:
            kind, item = todo.pop()
            if kind == "ctr":
                rgt = done.pop()
                lft = done.pop()
                done.append(Ctr(item, lft, rgt))
                continue
            if isinstance(item, Principal):
                node = self.node(item.node)
                if isinstance(node, EraNode):
                    done.append(Era())
                    continue
                todo.append(("ctr", node.label))
                todo.append(("port", node.right))
                todo.append(("port", node.left))
                continue
            done.append(self._var_tree(item, names, fresh))
        return done.pop()

    def _var_tree(self, port: Optional[Port], names: Dict[AuxPort, str], fresh) -> Var:
        if port is None:
            raise InvariantViolation("unwired slot", context="InteractionNet.to_text")
        name = names.get(port.port)
        if name is not None:
            return Var(name)
        counterpart = self.read_aux(port.port)
        if not isinstance(counterpart, Aux):
            raise InvariantViolation(
                "auxiliary port must not resolve to a principal port",
                context="InteractionNet.to_text",
            )
        name = next(fresh)
        names[port.port] = name
        names[counterpart.port] = name
        return Var(name)


__all__ = [
    "EraNode",
    "AgentNode",
    "Node",
    "InteractionNet",
    "name_gen",
]
