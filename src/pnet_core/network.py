"""Path network: per-label branch tries plus cross-label wire paths.

Traversal starts at every free port with each label positioned at its trie
root. Passing through an agent of label L moves only L's position to the
left or right child branch. Each wire is met twice, once per end; the second
meeting joins the two position vectors into one agent path per label and one
global path tying them together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from inet_core import metrics as _metrics
from inet_core.domains import Aux, AuxPort, Principal
from inet_core.errors import IndexOutOfRange, InvariantViolation
from inet_core.graph import EraNode, InteractionNet
from pnet_core.config import DEFAULT_PATH_CONFIG, PathConfig, require_label_count
from pnet_core.domains import AgentPathId, BranchId, PathId, _path_id
from pnet_core.trie import AgentPNet

Position = Tuple[BranchId, ...]


@dataclass(frozen=True)
class Path:
    agents: Tuple[AgentPathId, ...]


def _moved(position: Position, label: int, branch: BranchId) -> Position:
    return position[:label] + (branch,) + position[label + 1 :]


@dataclass
class PathNetwork:
    agents: List[AgentPNet]
    paths: List[Path] = field(default_factory=list)

    @classmethod
    def empty(cls, labels: int) -> "PathNetwork":
        labels = require_label_count(labels)
        return cls(agents=[AgentPNet() for _ in range(labels)])

    @classmethod
    def from_net(
        cls,
        net: InteractionNet,
        labels: int,
        *,
        cfg: PathConfig = DEFAULT_PATH_CONFIG,
    ) -> "PathNetwork":
        pnet = cls.empty(labels)
        pending: Dict[AuxPort, Position] = {}
        start = tuple(agent.root for agent in pnet.agents)
        for port in net.free_ports:
            pnet._add_paths(net, port, start, pending)
        if cfg.prune:
            pnet.remove_empty_branches()
        _metrics._pnet_metrics_update(
            sum(len(agent.branches) for agent in pnet.agents),
            sum(len(agent.paths) for agent in pnet.agents),
            len(pnet.paths),
            sum(agent.dedup_hits for agent in pnet.agents),
        )
        return pnet

    @property
    def labels(self) -> int:
        return len(self.agents)

    def agent(self, label: int) -> AgentPNet:
        if not 0 <= label < len(self.agents):
            raise IndexOutOfRange("label", label, len(self.agents))
        return self.agents[label]

    def path(self, path_id) -> Path:
        idx = int(_path_id(path_id))
        if not 0 <= idx < len(self.paths):
            raise IndexOutOfRange("path", idx, len(self.paths))
        return self.paths[idx]

    def add_path(self, agent_paths) -> PathId:
        agent_paths = tuple(agent_paths)
        if len(agent_paths) != self.labels:
            raise InvariantViolation(
                f"path spans {len(agent_paths)} labels, network has {self.labels}",
                context="PathNetwork.add_path",
            )
        self.paths.append(Path(agent_paths))
        return PathId(len(self.paths) - 1)

    def _add_paths(self, net, port, position: Position, pending) -> None:
        # Depth first, left subtree before right.
        todo = [(port, position)]
        while todo:
            port, position = todo.pop()
            if port is None:
                raise InvariantViolation("unwired slot", context="PathNetwork.from_net")
            if isinstance(port, Principal):
                node = net.node(port.node)
                if isinstance(node, EraNode):
                    continue
                label = node.label
                trie = self.agent(label)
                parent = position[label]
                left = trie.add_left(parent)
                right = trie.add_right(parent)
                todo.append((node.right, _moved(position, label, right)))
                todo.append((node.left, _moved(position, label, left)))
                continue
            self._visit_wire(net, port.port, position, pending)

    def _visit_wire(self, net, slot: AuxPort, position: Position, pending) -> None:
        counterpart = net.read_aux(slot)
        if not isinstance(counterpart, Aux):
            raise InvariantViolation(
                "wire endpoint must be auxiliary", context="PathNetwork.from_net"
            )
        other = pending.pop(slot, None)
        if other is None:
            pending[slot] = position
            pending[counterpart.port] = position
            return
        pending.pop(counterpart.port, None)
        self._close_wire(position, other)

    def _close_wire(self, mine: Position, other: Position) -> PathId:
        agent_paths = tuple(
            trie.add_path(b1, b2) for trie, b1, b2 in zip(self.agents, mine, other)
        )
        path_id = self.add_path(agent_paths)
        for trie, agent_path_id in zip(self.agents, agent_paths):
            trie.agent_path(agent_path_id).paths.append(path_id)
        return path_id

    def remove_empty_branches(self) -> int:
        return sum(agent.remove_empty_branches() for agent in self.agents)

    def branches_reachable(self, label: int) -> List[BranchId]:
        return self.agent(label).reachable()

    def __len__(self) -> int:
        return len(self.paths)

    def summary(self) -> dict:
        return {
            "labels": self.labels,
            "paths": len(self.paths),
            "branches": [len(agent.branches) for agent in self.agents],
            "reachable": [len(agent.reachable()) for agent in self.agents],
            "agent_paths": [len(agent.paths) for agent in self.agents],
        }


__all__ = [
    "Path",
    "PathNetwork",
]
