from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from inet_core.domains import Side, _side
from inet_core.errors import IndexOutOfRange
from pnet_core.domains import (
    ROOT_BRANCH,
    AgentPathId,
    BranchId,
    PathId,
    _agent_path_id,
    _branch_id,
)


@dataclass
class Branch:
    left: Optional[BranchId] = None
    right: Optional[BranchId] = None
    paths: List[AgentPathId] = field(default_factory=list)

    def child(self, side: Side) -> Optional[BranchId]:
        return self.left if side is Side.LEFT else self.right


@dataclass
class AgentPath:
    b1: BranchId
    b2: BranchId
    paths: List[PathId] = field(default_factory=list)


@dataclass
class AgentPNet:
    """Branch trie for one agent label.

    Each branch is a left/right choice sequence through agents of this label;
    agent paths join the two branches that a wire's ends were reached at.
    """

    branches: List[Branch] = field(default_factory=lambda: [Branch()])
    root: BranchId = ROOT_BRANCH
    paths: List[AgentPath] = field(default_factory=list)
    # unordered (b1, b2) -> agent path
    pair_index: Dict[Tuple[int, int], AgentPathId] = field(default_factory=dict, repr=False)
    dedup_hits: int = field(default=0, repr=False)

    def branch(self, branch_id) -> Branch:
        idx = int(_branch_id(branch_id))
        if not 0 <= idx < len(self.branches):
            raise IndexOutOfRange("branch", idx, len(self.branches))
        return self.branches[idx]

    def agent_path(self, agent_path_id) -> AgentPath:
        idx = int(_agent_path_id(agent_path_id))
        if not 0 <= idx < len(self.paths):
            raise IndexOutOfRange("agent path", idx, len(self.paths))
        return self.paths[idx]

    def add_child(self, parent_id, side) -> BranchId:
        """Return the child of parent on side, creating it on first use."""
        side = _side(side)
        parent = self.branch(parent_id)
        existing = parent.child(side)
        if existing is not None:
            return existing
        child_id = BranchId(len(self.branches))
        self.branches.append(Branch())
        if side is Side.LEFT:
            parent.left = child_id
        else:
            parent.right = child_id
        return child_id

    def add_left(self, parent_id) -> BranchId:
        return self.add_child(parent_id, Side.LEFT)

    def add_right(self, parent_id) -> BranchId:
        return self.add_child(parent_id, Side.RIGHT)

    @staticmethod
    def _pair_key(b1: BranchId, b2: BranchId) -> Tuple[int, int]:
        a, b = int(b1), int(b2)
        return (a, b) if a <= b else (b, a)

    def get_path(self, b1_id, b2_id) -> Optional[AgentPathId]:
        b1 = _branch_id(b1_id)
        b2 = _branch_id(b2_id)
        return self.pair_index.get(self._pair_key(b1, b2))

    def add_path(self, b1_id, b2_id) -> AgentPathId:
        b1 = _branch_id(b1_id)
        b2 = _branch_id(b2_id)
        key = self._pair_key(b1, b2)
        existing = self.pair_index.get(key)
        if existing is not None:
            self.dedup_hits += 1
            return existing
        branch1 = self.branch(b1)
        branch2 = self.branch(b2)
        path_id = AgentPathId(len(self.paths))
        self.paths.append(AgentPath(b1, b2))
        self.pair_index[key] = path_id
        branch1.paths.append(path_id)
        if branch2 is not branch1:
            branch2.paths.append(path_id)
        return path_id

    def reachable(self) -> List[BranchId]:
        """Branches reachable from the root, in preorder."""
        out = []
        stack = [self.root]
        while stack:
            branch_id = stack.pop()
            out.append(branch_id)
            branch = self.branch(branch_id)
            if branch.right is not None:
                stack.append(branch.right)
            if branch.left is not None:
                stack.append(branch.left)
        return out

    def _prune(self, branch_id: BranchId) -> Tuple[bool, int]:
        alive: Dict[int, bool] = {}
        detached = 0
        # Post-order: a branch is settled once both children are.
        todo = [(branch_id, False)]
        while todo:
            current, expanded = todo.pop()
            branch = self.branch(current)
            if not expanded:
                todo.append((current, True))
                todo.extend(
                    (child, False)
                    for child in (branch.right, branch.left)
                    if child is not None
                )
                continue
            is_alive = bool(branch.paths)
            for side in (Side.LEFT, Side.RIGHT):
                child = branch.child(side)
                if child is None:
                    continue
                if alive[int(child)]:
                    is_alive = True
                    continue
                if side is Side.LEFT:
                    branch.left = None
                else:
                    branch.right = None
                detached += 1
            alive[int(current)] = is_alive
        return alive[int(branch_id)], detached

    def remove_empty_branches(self) -> int:
        """Detach subtrees that carry no agent path; returns links cut.

        Detached branches stay in ``branches`` so ids remain stable.
        """
        _, detached = self._prune(self.root)
        return detached


__all__ = [
    "Branch",
    "AgentPath",
    "AgentPNet",
]
