# merkle.py
# SHA-256 Merkle tree over named content records.
#
# Guarantees: the root digest is a deterministic function of the ordered
# (name, content) pairs held by the leaves. tamper() edits content without
# touching any digest, so the next verify() of that record sees the root move.
#
# Leaf  = SHA256(name + content)
# Node  = SHA256(hex(left) + hex(right))       right may be absent: hex(left) + ""
# Root  = the single node left after pairwise reduction

import hashlib
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class MerkleError(Exception):
    """Base class for every error raised by the integrity engine."""


class EmptyTreeError(MerkleError):
    """Raised when a tree build is attempted with zero leaves."""


class RecordNotFoundError(MerkleError, KeyError):
    """Raised when tamper() names a record absent from the leaves."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        # KeyError would repr() the bare name.
        return f"no record named {self.name!r}"


class TreeNotBuiltError(MerkleError):
    """Raised when verify() runs before any root has been recorded."""


# ---------------------------------------------------------------------------
# Hashing
# ---------------------------------------------------------------------------


def sha256_digest(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hex_digest(digest: bytes) -> str:
    """Lowercase hex text of a digest, 64 characters for SHA-256."""
    return digest.hex()


def _as_bytes(content: bytes | bytearray | str) -> bytes:
    if isinstance(content, str):
        return content.encode("utf-8")
    if isinstance(content, (bytes, bytearray)):
        return bytes(content)
    raise TypeError(f"record content must be bytes or str, not {type(content).__name__}")


def _leaf_digest(name: str, content: bytes) -> bytes:
    return sha256_digest(name.encode("utf-8") + content)


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class LeafNode:
    """
    A named record. `digest` is a cache: it reflects name + content as of the
    last rehash() and goes stale after a tamper().
    """

    name: str
    content: bytes
    digest: bytes

    @property
    def hex(self) -> str:
        return hex_digest(self.digest)

    def rehash(self) -> bytes:
        self.digest = _leaf_digest(self.name, self.content)
        return self.digest


@dataclass(eq=False)
class InternalNode:
    left: "Node"
    right: "Node | None"
    digest: bytes

    @classmethod
    def join(cls, left: "Node", right: "Node | None") -> "InternalNode":
        # Children are combined as hex text, not raw bytes.
        text = left.hex + (right.hex if right is not None else "")
        return cls(left=left, right=right, digest=sha256_digest(text.encode("ascii")))

    @property
    def hex(self) -> str:
        return hex_digest(self.digest)


Node = LeafNode | InternalNode


class VerifyResult(str, Enum):
    INTACT = "intact"
    TAMPERED = "tampered"
    NOT_FOUND = "not_found"


# ---------------------------------------------------------------------------
# MerkleTree
# ---------------------------------------------------------------------------


class MerkleTree:
    """
    Binary Merkle tree whose leaves are named content records.

    Leaves keep their construction order, which fixes the shape of the tree.
    Odd-length levels promote the last node into a parent with no right
    child rather than duplicating it.

    The tree owns its leaves and every internal node. Each build() creates a
    fresh set of internal nodes and drops the previous one.
    """

    def __init__(self, leaves: list[LeafNode] | None = None) -> None:
        self._leaves: list[LeafNode] = list(leaves or [])
        self._root: Node | None = None
        self._depth: int = 0

    # ------------------------------------------------------------------
    # Tree construction
    # ------------------------------------------------------------------

    def build(self) -> None:
        """
        Reduce the leaves pairwise into a single root.

        Raises EmptyTreeError when there are no leaves. The new levels are
        assembled locally and only published to `root` once complete.
        """
        if not self._leaves:
            raise EmptyTreeError("Cannot build a Merkle tree with no leaves.")

        level: list[Node] = list(self._leaves)
        depth = 0
        while len(level) > 1:
            level = [
                InternalNode.join(level[i], level[i + 1] if i + 1 < len(level) else None)
                for i in range(0, len(level), 2)
            ]
            depth += 1

        self._root = level[0]
        self._depth = depth
        logger.debug(
            "built tree: leaves=%d depth=%d root=%s", len(self._leaves), depth, self._root.hex
        )

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def _find_leaf(self, name: str) -> LeafNode | None:
        # Linear scan; first match in leaf order wins for duplicate names.
        for leaf in self._leaves:
            if leaf.name == name:
                return leaf
        return None

    def verify(self, name: str) -> VerifyResult:
        """
        Recompute the named leaf from its current content, rebuild the whole
        tree and compare the new root against the one recorded before.

        Always rebuilds, so the cached leaf digest and all internal nodes are
        replaced even when the result is INTACT. After a TAMPERED result the
        tree is back in sync and the next verify() reports INTACT.
        """
        leaf = self._find_leaf(name)
        if leaf is None:
            logger.debug("verify %r: not found", name)
            return VerifyResult.NOT_FOUND
        if self._root is None:
            raise TreeNotBuiltError("verify() requires a built tree; call build() first.")

        before = self._root.digest
        leaf.rehash()
        self.build()

        result = VerifyResult.INTACT if self._root.digest == before else VerifyResult.TAMPERED
        logger.debug("verify %r: %s", name, result.value)
        return result

    # ------------------------------------------------------------------
    # Tamper simulation
    # ------------------------------------------------------------------

    def tamper(self, name: str, new_content: bytes | bytearray | str) -> None:
        """
        Overwrite a record's content in place. Digests are left stale on
        purpose; nothing is rehashed or rebuilt here.
        """
        leaf = self._find_leaf(name)
        if leaf is None:
            raise RecordNotFoundError(name)
        leaf.content = _as_bytes(new_content)
        logger.debug("tampered %r (%d bytes)", name, len(leaf.content))

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def release(self) -> None:
        """Drop the root, every internal node and the leaf sequence."""
        self._root = None
        self._depth = 0
        self._leaves = []

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def root(self) -> Node | None:
        return self._root

    @property
    def root_hex(self) -> str | None:
        """Hex-encoded SHA-256 root, or None before the first build."""
        return self._root.hex if self._root is not None else None

    @property
    def leaves(self) -> list[LeafNode]:
        """Shallow copy of the leaves in construction order."""
        return list(self._leaves)

    @property
    def leaf_count(self) -> int:
        return len(self._leaves)

    @property
    def depth(self) -> int:
        """Number of internal levels above the leaves from the last build."""
        return self._depth

    def iter_levels(self) -> Iterator[list[Node]]:
        """Yield the nodes reachable from the root, one level at a time, root first."""
        level: list[Node] = [self._root] if self._root is not None else []
        while level:
            yield level
            children: list[Node] = []
            for node in level:
                if isinstance(node, InternalNode):
                    children.append(node.left)
                    if node.right is not None:
                        children.append(node.right)
            level = children


# ---------------------------------------------------------------------------
# Leaf construction
# ---------------------------------------------------------------------------


def build_leaves(names: Sequence[str], contents: Sequence[bytes | bytearray | str]) -> MerkleTree:
    """
    Create one leaf per (name, content) pair, in input order, and return an
    unbuilt tree holding them. Duplicate names are accepted as-is.
    """
    if len(names) != len(contents):
        raise ValueError(
            f"names and contents must have equal length ({len(names)} != {len(contents)})."
        )

    leaves: list[LeafNode] = []
    for name, content in zip(names, contents):
        data = _as_bytes(content)
        leaves.append(LeafNode(name=name, content=data, digest=_leaf_digest(name, data)))
    return MerkleTree(leaves)
