from __future__ import annotations

from inet_core.domains import Aux, FreePort, Principal
from inet_core.errors import AuxOnNullaryNode, IndexOutOfRange, InvariantViolation


def _slot_label(slot) -> str:
    if isinstance(slot, FreePort):
        return f"free[{slot.index}]"
    return f"node[{int(slot.node)}].{slot.side.value}"


def _check_slot(net, slot, context):
    value = net.read_aux(slot)
    if value is None:
        raise InvariantViolation(f"{_slot_label(slot)} is unwired", context=context)
    if isinstance(value, Aux):
        try:
            back = net.read_aux(value.port)
        except (IndexOutOfRange, AuxOnNullaryNode) as err:
            raise InvariantViolation(
                f"{_slot_label(slot)} points at a missing slot ({err})",
                context=context,
            ) from err
        if back != Aux(slot):
            raise InvariantViolation(
                f"wire {_slot_label(slot)} -> {_slot_label(value.port)} is not reciprocal",
                context=context,
            )
        return
    try:
        back = net.read(value)
    except IndexOutOfRange as err:
        raise InvariantViolation(
            f"{_slot_label(slot)} points at a missing node ({err})", context=context
        ) from err
    if back != Aux(slot):
        raise InvariantViolation(
            f"node {int(value.node)} principal does not face {_slot_label(slot)}",
            context=context,
        )


def validate_wires(net, *, context: str = "validate_wires") -> None:
    """Raise InvariantViolation unless every connection is reciprocal."""
    for slot in net.aux_slots():
        _check_slot(net, slot, context)
    for i in range(len(net.nodes)):
        # Every principal port must be held by the slot it faces.
        counterpart = net.read(Principal(i))
        try:
            value = net.read_aux(counterpart.port)
        except (IndexOutOfRange, AuxOnNullaryNode) as err:
            raise InvariantViolation(
                f"node {i} principal faces a missing slot ({err})", context=context
            ) from err
        if value != Principal(i):
            raise InvariantViolation(
                f"node {i} principal is not held by {_slot_label(counterpart.port)}",
                context=context,
            )


def wires_ok(net) -> bool:
    try:
        validate_wires(net)
    except InvariantViolation:
        return False
    return True


__all__ = [
    "validate_wires",
    "wires_ok",
]
