import jax
import jax.numpy as jnp
import numpy as np
from typing import NamedTuple, Tuple

# Dense (device) view of a PathNetwork; -1 marks a missing child.

NO_BRANCH = -1


class BranchArrays(NamedTuple):
    left: jnp.ndarray
    right: jnp.ndarray
    path_count: jnp.ndarray


class PNetArrays(NamedTuple):
    branches: Tuple[BranchArrays, ...]
    # path_table[p, label] = agent path id of global path p in that label.
    path_table: jnp.ndarray


def trie_to_arrays(trie) -> BranchArrays:
    b = len(trie.branches)
    left = np.full((b,), NO_BRANCH, dtype=np.int32)
    right = np.full((b,), NO_BRANCH, dtype=np.int32)
    path_count = np.zeros((b,), dtype=np.uint32)
    for i, branch in enumerate(trie.branches):
        if branch.left is not None:
            left[i] = int(branch.left)
        if branch.right is not None:
            right[i] = int(branch.right)
        path_count[i] = len(branch.paths)
    return BranchArrays(
        left=jnp.asarray(left),
        right=jnp.asarray(right),
        path_count=jnp.asarray(path_count),
    )


def pnet_to_arrays(pnet) -> PNetArrays:
    table = np.asarray(
        [[int(a) for a in path.agents] for path in pnet.paths], dtype=np.int32
    ).reshape((len(pnet.paths), pnet.labels))
    return PNetArrays(
        branches=tuple(trie_to_arrays(agent) for agent in pnet.agents),
        path_table=jnp.asarray(table),
    )


@jax.jit
def reachable_mask(arrays: BranchArrays) -> jnp.ndarray:
    """Mask of branches reachable from the root (branch 0)."""
    b = arrays.left.shape[0]
    mask0 = jnp.zeros((b,), dtype=jnp.int32).at[0].set(1)
    # Missing children scatter into a dump slot at index b.
    left = jnp.where(arrays.left >= 0, arrays.left, b)
    right = jnp.where(arrays.right >= 0, arrays.right, b)

    def cond(carry):
        _, changed = carry
        return changed

    def body(carry):
        mask, _ = carry
        grown = jnp.concatenate([mask, jnp.zeros((1,), dtype=jnp.int32)])
        grown = grown.at[left].max(mask).at[right].max(mask)[:b]
        return grown, jnp.any(grown != mask)

    mask, _ = jax.lax.while_loop(cond, body, (mask0, jnp.bool_(True)))
    return mask > 0


@jax.jit
def live_path_counts(arrays: BranchArrays) -> jnp.ndarray:
    """Agent-path references carried by reachable branches."""
    mask = reachable_mask(arrays)
    return jnp.where(mask, arrays.path_count, jnp.uint32(0))


__all__ = [
    "NO_BRANCH",
    "BranchArrays",
    "PNetArrays",
    "trie_to_arrays",
    "pnet_to_arrays",
    "reachable_mask",
    "live_path_counts",
]
