import os

_build_metrics_nets = 0
_build_metrics_nodes = 0
_build_metrics_wires = 0
_build_metrics_pnets = 0
_build_metrics_branches = 0
_build_metrics_agent_paths = 0
_build_metrics_paths = 0
_build_metrics_dedup_hits = 0


def _build_metrics_enabled():
    value = os.environ.get("INET_BUILD_METRICS", "").strip().lower()
    return value in ("1", "true", "yes", "on")


def build_metrics_reset():
    global _build_metrics_nets
    global _build_metrics_nodes
    global _build_metrics_wires
    global _build_metrics_pnets
    global _build_metrics_branches
    global _build_metrics_agent_paths
    global _build_metrics_paths
    global _build_metrics_dedup_hits
    _build_metrics_nets = 0
    _build_metrics_nodes = 0
    _build_metrics_wires = 0
    _build_metrics_pnets = 0
    _build_metrics_branches = 0
    _build_metrics_agent_paths = 0
    _build_metrics_paths = 0
    _build_metrics_dedup_hits = 0


def _net_metrics_update(nodes, wires):
    if not _build_metrics_enabled():
        return
    global _build_metrics_nets
    global _build_metrics_nodes
    global _build_metrics_wires
    _build_metrics_nets += 1
    _build_metrics_nodes += int(nodes)
    _build_metrics_wires += int(wires)


def _pnet_metrics_update(branches, agent_paths, paths, dedup_hits):
    if not _build_metrics_enabled():
        return
    global _build_metrics_pnets
    global _build_metrics_branches
    global _build_metrics_agent_paths
    global _build_metrics_paths
    global _build_metrics_dedup_hits
    _build_metrics_pnets += 1
    _build_metrics_branches += int(branches)
    _build_metrics_agent_paths += int(agent_paths)
    _build_metrics_paths += int(paths)
    _build_metrics_dedup_hits += int(dedup_hits)


def build_metrics_get():
    if not _build_metrics_enabled():
        return {
            "nets": 0,
            "nodes": 0,
            "wires": 0,
            "pnets": 0,
            "branches": 0,
            "agent_paths": 0,
            "paths": 0,
            "dedup_hits": 0,
            "dedup_rate": 0.0,
        }
    # Every global path looks up one agent path per label.
    lookups = int(_build_metrics_agent_paths) + int(_build_metrics_dedup_hits)
    dedup_rate = (_build_metrics_dedup_hits / lookups) if lookups else 0.0
    return {
        "nets": int(_build_metrics_nets),
        "nodes": int(_build_metrics_nodes),
        "wires": int(_build_metrics_wires),
        "pnets": int(_build_metrics_pnets),
        "branches": int(_build_metrics_branches),
        "agent_paths": int(_build_metrics_agent_paths),
        "paths": int(_build_metrics_paths),
        "dedup_hits": int(_build_metrics_dedup_hits),
        "dedup_rate": float(dedup_rate),
    }


__all__ = [
    "build_metrics_get",
    "build_metrics_reset",
]
