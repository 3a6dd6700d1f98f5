import pytest

from inet_core import IndexOutOfRange, InvariantViolation, NodeSlot, Principal, Side
from pnet_core import (
    AgentPathId,
    BranchId,
    Path,
    PathConfig,
    PathId,
    PathNetwork,
)
from inet_core.errors import PathConfigError
from tests import harness

pytestmark = pytest.mark.m2

CROSSED_NET = "((a b) (c d))\n((a c) (b d))"


def test_minimal_net_single_label():
    net = harness.build(harness.MINIMAL_NET)
    pnet = PathNetwork.from_net(net, 1)
    trie = pnet.agent(0)
    assert len(trie.branches) == 3
    root = trie.branch(0)
    assert (root.left, root.right) == (BranchId(1), BranchId(2))
    # Each wire joins a branch to itself: left ends meet at 1, right at 2.
    assert [(p.b1, p.b2) for p in trie.paths] == [
        (BranchId(1), BranchId(1)),
        (BranchId(2), BranchId(2)),
    ]
    assert pnet.paths == [Path((AgentPathId(0),)), Path((AgentPathId(1),))]
    assert trie.agent_path(0).paths == [PathId(0)]
    assert trie.agent_path(1).paths == [PathId(1)]
    assert len(pnet) == 2


def test_untouched_label_stays_at_root():
    net = harness.build(harness.MINIMAL_NET)
    pnet = PathNetwork.from_net(net, 2)
    idle = pnet.agent(1)
    assert len(idle.branches) == 1
    assert [(p.b1, p.b2) for p in idle.paths] == [(BranchId(0), BranchId(0))]
    # Both wires collapse onto the one root-root agent path.
    assert idle.agent_path(0).paths == [PathId(0), PathId(1)]
    assert idle.dedup_hits == 1
    assert pnet.path(0) == Path((AgentPathId(0), AgentPathId(0)))
    assert pnet.path(1) == Path((AgentPathId(1), AgentPathId(0)))


def test_crossed_wires_share_an_agent_path():
    pnet = PathNetwork.from_net(harness.build(CROSSED_NET), 1)
    trie = pnet.agent(0)
    assert len(trie.branches) == 7
    assert [(int(p.b1), int(p.b2)) for p in trie.paths] == [(3, 3), (4, 5), (6, 6)]
    assert len(pnet) == 4
    assert [path.agents for path in pnet.paths] == [
        (AgentPathId(0),),
        (AgentPathId(1),),
        (AgentPathId(1),),
        (AgentPathId(2),),
    ]
    assert trie.agent_path(1).paths == [PathId(1), PathId(2)]
    assert trie.dedup_hits == 1


def test_back_references_list_each_global_path_once():
    pnet = PathNetwork.from_net(harness.build(CROSSED_NET), 3)
    for label in range(pnet.labels):
        trie = pnet.agent(label)
        seen = [pid for agent_path in trie.paths for pid in agent_path.paths]
        assert sorted(seen, key=int) == [PathId(i) for i in range(len(pnet))]
    for i, path in enumerate(pnet.paths):
        for label, agent_path_id in enumerate(path.agents):
            assert PathId(i) in pnet.agent(label).agent_path(agent_path_id).paths


def test_labels_advance_independently():
    # Label 1 agents never move label 0's position.
    pnet = PathNetwork.from_net(harness.build("[(a b) c]\n[(a b) c]"), 2)
    assert len(pnet.agent(1).branches) == 3
    assert len(pnet.agent(0).branches) == 3
    # Wire c stays at label 0's root.
    c_path = pnet.path(2)
    assert pnet.agent(0).agent_path(c_path.agents[0]).b1 == BranchId(0)
    assert pnet.agent(1).agent_path(c_path.agents[1]).b1 == BranchId(2)


def test_erasers_end_traversal():
    pnet = PathNetwork.from_net(harness.build("*\n(* *)"), 1)
    assert len(pnet) == 0
    assert len(pnet.agent(0).branches) == 3


def test_free_port_wire_joins_roots():
    pnet = PathNetwork.from_net(harness.build("x\nx"), 1)
    assert len(pnet) == 1
    assert (pnet.agent(0).paths[0].b1, pnet.agent(0).paths[0].b2) == (
        BranchId(0),
        BranchId(0),
    )


def test_label_bound():
    net = harness.build("{5 a a}")
    with pytest.raises(IndexOutOfRange, match="label 5"):
        PathNetwork.from_net(net, 5)
    assert len(PathNetwork.from_net(net, 6)) == 1


@pytest.mark.parametrize("labels", [0, -1, 1.5, True])
def test_label_count_validated(labels):
    with pytest.raises(PathConfigError):
        PathNetwork.from_net(harness.build("*"), labels)


def test_corrupt_wire_rejected():
    net = harness.build(harness.MINIMAL_NET)
    net.write(NodeSlot(1, Side.LEFT), Principal(0))
    with pytest.raises(InvariantViolation, match="wire endpoint must be auxiliary"):
        PathNetwork.from_net(net, 1)


def test_prune_on_build_keeps_path_ancestors():
    text = "((a *) (* *))\n((a *) *)"
    plain = PathNetwork.from_net(harness.build(text), 1)
    pruned = PathNetwork.from_net(harness.build(text), 1, cfg=PathConfig(prune=True))
    assert len(pruned.branches_reachable(0)) < len(plain.branches_reachable(0))
    trie = pruned.agent(0)
    assert harness.reachable_have_paths(trie)
    for agent_path in trie.paths:
        assert agent_path.b1 in trie.reachable()
        assert agent_path.b2 in trie.reachable()


@pytest.mark.parametrize("text", harness.ROUND_TRIP_NETS)
def test_pruning_soundness(text):
    pnet = PathNetwork.from_net(harness.build(text), 10)
    pnet.remove_empty_branches()
    for label in range(pnet.labels):
        trie = pnet.agent(label)
        assert harness.reachable_have_paths(trie)
        reachable = set(trie.reachable())
        for agent_path in trie.paths:
            assert {agent_path.b1, agent_path.b2} <= reachable


def test_summary_counts():
    pnet = PathNetwork.from_net(harness.build(harness.MINIMAL_NET), 2)
    assert pnet.summary() == {
        "labels": 2,
        "paths": 2,
        "branches": [3, 1],
        "reachable": [3, 1],
        "agent_paths": [2, 1],
    }


def test_deeply_nested_net_builds_paths():
    depth = 5000
    pnet = PathNetwork.from_net(harness.build(harness.nested_net(depth)), 1)
    trie = pnet.agent(0)
    assert len(pnet) == 1
    assert len(trie.branches) == 2 * depth + 1
    assert trie.get_path(0, 2 * depth - 1) == AgentPathId(0)
    assert trie.remove_empty_branches() == depth
    assert len(trie.reachable()) == depth + 1
