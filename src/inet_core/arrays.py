import jax
import jax.numpy as jnp
import numpy as np
from typing import NamedTuple, Tuple

from inet_core.domains import Aux, FreePort, Principal, Side
from inet_core.errors import InvariantViolation
from inet_core.graph import EraNode

# Dense (device) view of an InteractionNet.

TYPE_ERA = jnp.uint8(1)
TYPE_AGENT = jnp.uint8(2)

PORT_PRINCIPAL = jnp.uint32(0)
PORT_AUX_LEFT = jnp.uint32(1)
PORT_AUX_RIGHT = jnp.uint32(2)
PORT_FREE = jnp.uint32(3)

_SIDE_TAG = {Side.LEFT: 1, Side.RIGHT: 2}


class NetArrays(NamedTuple):
    node_type: jnp.ndarray
    label: jnp.ndarray
    # ports[n, 0]: slot faced by the principal; ports[n, 1|2]: left/right value.
    ports: jnp.ndarray
    free_ports: jnp.ndarray


def encode_port(idx: jnp.ndarray, tag: jnp.ndarray) -> jnp.ndarray:
    return (jnp.asarray(idx).astype(jnp.uint32) << jnp.uint32(2)) | jnp.asarray(
        tag
    ).astype(jnp.uint32)


def decode_port(ptr: jnp.ndarray) -> Tuple[jnp.ndarray, jnp.ndarray]:
    ptr = jnp.asarray(ptr, dtype=jnp.uint32)
    idx = ptr >> jnp.uint32(2)
    tag = ptr & jnp.uint32(0x3)
    return idx.astype(jnp.uint32), tag.astype(jnp.uint32)


def _encode_slot_host(slot) -> int:
    if isinstance(slot, FreePort):
        return (int(slot.index) << 2) | int(PORT_FREE)
    return (int(slot.node) << 2) | _SIDE_TAG[slot.side]


def _encode_value_host(value) -> int:
    if value is None:
        raise InvariantViolation("unwired slot", context="net_to_arrays")
    if isinstance(value, Principal):
        return (int(value.node) << 2) | int(PORT_PRINCIPAL)
    if isinstance(value, Aux):
        return _encode_slot_host(value.port)
    raise TypeError(f"not a port: {value!r}")


def net_to_arrays(net) -> NetArrays:
    """Stage a net on the host with numpy, then move it to the device."""
    n = len(net.nodes)
    node_type = np.zeros((n,), dtype=np.uint8)
    label = np.zeros((n,), dtype=np.uint32)
    ports = np.zeros((n, 3), dtype=np.uint32)
    for i, node in enumerate(net.nodes):
        if isinstance(node, EraNode):
            node_type[i] = int(TYPE_ERA)
            ports[i, 0] = _encode_slot_host(node.endpoint)
            continue
        node_type[i] = int(TYPE_AGENT)
        label[i] = node.label
        ports[i, 0] = _encode_slot_host(node.principal)
        ports[i, 1] = _encode_value_host(node.left)
        ports[i, 2] = _encode_value_host(node.right)
    free_ports = np.asarray(
        [_encode_value_host(v) for v in net.free_ports], dtype=np.uint32
    ).reshape((len(net.free_ports),))
    return NetArrays(
        node_type=jnp.asarray(node_type),
        label=jnp.asarray(label),
        ports=jnp.asarray(ports),
        free_ports=jnp.asarray(free_ports),
    )


@jax.jit
def scan_wires(arrays: NetArrays) -> jnp.ndarray:
    """True when every stored pointer is answered by a pointer back."""
    node_type = arrays.node_type
    ports = arrays.ports
    free_ports = arrays.free_ports
    n = node_type.shape[0]
    k = free_ports.shape[0]
    # One sentinel row/slot absorbs out-of-range lookups.
    ports_p = jnp.concatenate([ports, jnp.zeros((1, 3), dtype=jnp.uint32)], axis=0)
    free_p = jnp.concatenate([free_ports, jnp.zeros((1,), dtype=jnp.uint32)])
    type_p = jnp.concatenate([node_type, jnp.zeros((1,), dtype=jnp.uint8)])

    def lookup(ptr):
        idx, tag = decode_port(ptr)
        is_free = tag == PORT_FREE
        in_range = jnp.where(is_free, idx < k, idx < n)
        node_i = jnp.where(in_range & ~is_free, idx, n).astype(jnp.int32)
        free_i = jnp.where(in_range & is_free, idx, k).astype(jnp.int32)
        col = jnp.where(is_free, 0, tag).astype(jnp.int32)
        val = jnp.where(is_free, free_p[free_i], ports_p[node_i, col])
        is_aux = (tag == PORT_AUX_LEFT) | (tag == PORT_AUX_RIGHT)
        ok = in_range & (~is_aux | (type_p[node_i] == TYPE_AGENT))
        return val, ok

    nodes = jnp.arange(n, dtype=jnp.uint32)
    is_agent = node_type == TYPE_AGENT
    selves = jnp.concatenate(
        [
            encode_port(nodes, PORT_PRINCIPAL),
            encode_port(nodes, PORT_AUX_LEFT),
            encode_port(nodes, PORT_AUX_RIGHT),
            encode_port(jnp.arange(k, dtype=jnp.uint32), PORT_FREE),
        ]
    )
    values = jnp.concatenate([ports[:, 0], ports[:, 1], ports[:, 2], free_ports])
    live = jnp.concatenate(
        [jnp.ones((n,), dtype=jnp.bool_), is_agent, is_agent, jnp.ones((k,), dtype=jnp.bool_)]
    )
    # A principal port always faces an auxiliary slot.
    principal_ok = jnp.concatenate(
        [
            decode_port(ports[:, 0])[1] != PORT_PRINCIPAL,
            jnp.ones((2 * n + k,), dtype=jnp.bool_),
        ]
    )
    back, ok = lookup(values)
    good = ~live | (ok & principal_ok & (back == selves))
    return jnp.all(good)


__all__ = [
    "TYPE_ERA",
    "TYPE_AGENT",
    "PORT_PRINCIPAL",
    "PORT_AUX_LEFT",
    "PORT_AUX_RIGHT",
    "PORT_FREE",
    "NetArrays",
    "encode_port",
    "decode_port",
    "net_to_arrays",
    "scan_wires",
]
