"""Merkle trees over 32-byte digests and the checks used by the commitment verifier."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, MutableSet, Sequence

from gkrproof.field import FieldElement

#: Size in bytes of every digest handled here.
DIGEST_SIZE = 32

#: Size in bytes of one serialised field element.
ELEMENT_SIZE = 16

ZERO_DIGEST = bytes(DIGEST_SIZE)


def _check_digest(value: bytes, what: str = "digest") -> bytes:
    value = bytes(value)
    if len(value) != DIGEST_SIZE:
        raise ValueError(f"{what} must be {DIGEST_SIZE} bytes, got {len(value)}")
    return value


def element_bytes(x: FieldElement) -> bytes:
    """Serialise an element as its real then imaginary part, 8 little-endian bytes each."""
    return x.real.to_bytes(8, "little") + x.img.to_bytes(8, "little")


def hash_pair(left: bytes, right: bytes) -> bytes:
    """Compress two digests into one."""
    data = _check_digest(left, "left digest") + _check_digest(right, "right digest")
    return hashlib.sha256(data).digest()


def hash_single_field_element(x: FieldElement) -> bytes:
    """Hash one element, zero-padded to two full digest blocks."""
    block = element_bytes(x) + bytes(DIGEST_SIZE - ELEMENT_SIZE)
    return hash_pair(block, ZERO_DIGEST)


def hash_double_field_element_merkle_damgard(
    x: FieldElement, y: FieldElement, prev_hash: bytes
) -> bytes:
    """Chain two elements onto ``prev_hash``."""
    return hash_pair(prev_hash, element_bytes(x) + element_bytes(y))


def hash_value_pairs(values: Iterable[tuple[FieldElement, FieldElement]]) -> bytes:
    """Fold pairs of elements into the leaf digest that :func:`verify_merkle` expects."""
    digest = ZERO_DIGEST
    for first, second in values:
        digest = hash_pair(element_bytes(first) + element_bytes(second), digest)
    return digest


def create_tree(leaves: Sequence[bytes]) -> list[bytes]:
    """Build a Merkle tree stored heap-style.

    The leaf count is padded up to a power of two with the digest of two
    zero blocks. Node ``j`` has children ``2j`` and ``2j + 1``; the root is at
    index 1 and index 0 is an unused zero digest.
    """
    size = 1
    while size < len(leaves):
        size *= 2

    padding = hash_pair(ZERO_DIGEST, ZERO_DIGEST)
    tree = [ZERO_DIGEST] * size
    tree.extend(_check_digest(leaf, "leaf") for leaf in leaves)
    tree.extend([padding] * (size - len(leaves)))

    for node in range(size - 1, 0, -1):
        tree[node] = hash_pair(tree[2 * node], tree[2 * node + 1])
    return tree


def verify_claim(
    root_hash: bytes,
    tree: Sequence[bytes],
    leaf_hash: bytes,
    position: int,
    n: int,
    visited: MutableSet[int] | None = None,
) -> tuple[bool, int]:
    """Check that ``leaf_hash`` sits at ``position`` in a tree of ``n`` leaves.

    Sibling nodes read from ``tree`` are recorded in ``visited``; the second
    value returned is the number of proof bytes for siblings not seen before.
    """
    if n <= 0 or n & (n - 1):
        raise ValueError(f"leaf count must be a power of two, got {n}")
    if not 0 <= position < n:
        raise ValueError(f"position {position} out of range for {n} leaves")
    if visited is None:
        visited = set()

    current = _check_digest(leaf_hash, "leaf hash")
    node = position + n
    proof_bytes = 0
    while node != 1:
        sibling = node ^ 1
        if sibling not in visited:
            visited.add(sibling)
            proof_bytes += DIGEST_SIZE
        if node & 1:
            current = hash_pair(tree[sibling], current)
        else:
            current = hash_pair(current, tree[sibling])
        node //= 2
    return current == _check_digest(root_hash, "root hash"), proof_bytes


def verify_merkle(
    root_hash: bytes,
    merkle_path: Sequence[bytes],
    position: int,
    values: Iterable[tuple[FieldElement, FieldElement]],
) -> bool:
    """Check an authentication path whose last entry is the leaf for ``values``.

    The entries before the last are the siblings from the leaf level upward.
    """
    if not merkle_path:
        raise ValueError("merkle path must hold at least the leaf")
    leaf = _check_digest(merkle_path[-1], "leaf")
    current = leaf
    for sibling in merkle_path[:-1]:
        if position & 1:
            current = hash_pair(sibling, current)
        else:
            current = hash_pair(current, sibling)
        position //= 2
    return current == _check_digest(root_hash, "root hash") and hash_value_pairs(
        values
    ) == leaf