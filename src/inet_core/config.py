from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional

from inet_core.errors import NetConfigError
from inet_core.tree import parse as _default_parse
from inet_core.tree import render as _default_render

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("", "0", "false", "no", "off")


def env_flag(name: str) -> bool:
    value = os.environ.get(name, "").strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise NetConfigError(f"{name} must be a boolean flag, got {value!r}", context=name)


def _test_guards_enabled() -> bool:
    return env_flag("INET_TEST_GUARDS")


def _wire_guard_enabled() -> bool:
    return _test_guards_enabled() or env_flag("INET_WIRE_GUARD")


@dataclass(frozen=True, slots=True)
class NetConfig:
    """Construction DI bundle for interaction nets.

    parse_fn/render_fn replace the tree syntax; wire_guard forces (True) or
    skips (False) the reciprocity check after construction, None defers to
    the INET_TEST_GUARDS / INET_WIRE_GUARD environment flags.
    """

    parse_fn: Optional[Callable] = None
    render_fn: Optional[Callable] = None
    wire_guard: Optional[bool] = None


DEFAULT_NET_CONFIG = NetConfig()


def resolve_parse_fn(cfg: NetConfig) -> Callable:
    if cfg.parse_fn is not None:
        return cfg.parse_fn
    return _default_parse


def resolve_render_fn(cfg: NetConfig) -> Callable:
    if cfg.render_fn is not None:
        return cfg.render_fn
    return _default_render


def resolve_wire_guard(cfg: NetConfig) -> bool:
    if cfg.wire_guard is not None:
        return bool(cfg.wire_guard)
    return _wire_guard_enabled()


__all__ = [
    "NetConfig",
    "DEFAULT_NET_CONFIG",
    "env_flag",
    "resolve_parse_fn",
    "resolve_render_fn",
    "resolve_wire_guard",
]
