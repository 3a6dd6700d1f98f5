import pytest

from inet_core import IndexOutOfRange, NodeId
from pnet_core import AgentPathId, AgentPNet, BranchId
from tests import harness

pytestmark = pytest.mark.m2


def test_new_trie_has_root_only():
    trie = AgentPNet()
    assert trie.root == BranchId(0)
    assert len(trie.branches) == 1
    assert trie.reachable() == [BranchId(0)]


def test_children_are_get_or_create():
    trie = AgentPNet()
    left = trie.add_left(trie.root)
    right = trie.add_right(trie.root)
    assert left == BranchId(1)
    assert right == BranchId(2)
    assert trie.add_left(trie.root) == left
    assert trie.add_right(trie.root) == right
    assert len(trie.branches) == 3


def test_right_child_does_not_alias_left():
    trie = AgentPNet()
    left = trie.add_left(0)
    right = trie.add_right(0)
    assert left != right
    root = trie.branch(0)
    assert (root.left, root.right) == (left, right)


def test_add_path_dedups_unordered_pair():
    trie = AgentPNet()
    a = trie.add_left(0)
    b = trie.add_right(0)
    assert trie.get_path(a, b) is None
    first = trie.add_path(a, b)
    assert trie.add_path(a, b) == first
    assert trie.add_path(b, a) == first
    assert trie.get_path(b, a) == first
    assert len(trie.paths) == 1
    assert trie.dedup_hits == 2
    assert trie.branch(a).paths == [first]
    assert trie.branch(b).paths == [first]
    assert trie.agent_path(first).b1 == a
    assert trie.agent_path(first).b2 == b


def test_add_path_on_one_branch_registers_once():
    trie = AgentPNet()
    path = trie.add_path(0, 0)
    assert path == AgentPathId(0)
    assert trie.branch(0).paths == [path]


def test_bad_ids_rejected():
    trie = AgentPNet()
    with pytest.raises(IndexOutOfRange, match="branch 4"):
        trie.branch(4)
    with pytest.raises(IndexOutOfRange, match="agent path 0"):
        trie.agent_path(0)
    with pytest.raises(TypeError, match="expected BranchId"):
        trie.add_left(NodeId(0))


def test_prune_keeps_ancestors_of_used_branches():
    trie = AgentPNet()
    left = trie.add_left(0)
    right = trie.add_right(0)
    deep = trie.add_left(left)
    trie.add_right(left)
    trie.add_left(right)
    trie.add_path(deep, deep)
    detached = trie.remove_empty_branches()
    root = trie.branch(0)
    assert root.left == left
    assert root.right is None
    assert trie.branch(left).left == deep
    assert trie.branch(left).right is None
    # left.right, right.left and root.right were cut.
    assert detached == 3
    assert trie.reachable() == [BranchId(0), left, deep]
    # Storage is kept so ids stay valid.
    assert len(trie.branches) == 6
    assert harness.reachable_have_paths(trie)


def test_prune_empty_trie_detaches_everything():
    trie = AgentPNet()
    trie.add_left(0)
    trie.add_right(0)
    assert trie.remove_empty_branches() == 2
    assert trie.reachable() == [BranchId(0)]
