from __future__ import annotations

from dataclasses import dataclass

from inet_core.errors import PathConfigError


@dataclass(frozen=True, slots=True)
class PathConfig:
    """Build options for PathNetwork.from_net."""

    # Run remove_empty_branches once construction finishes.
    prune: bool = False


DEFAULT_PATH_CONFIG = PathConfig()


def require_label_count(labels) -> int:
    if isinstance(labels, bool) or not isinstance(labels, int):
        raise PathConfigError(
            f"label count must be an int, got {type(labels).__name__}", labels=labels
        )
    if labels < 1:
        raise PathConfigError(f"label count must be positive, got {labels}", labels=labels)
    return labels


__all__ = [
    "PathConfig",
    "DEFAULT_PATH_CONFIG",
    "require_label_count",
]
