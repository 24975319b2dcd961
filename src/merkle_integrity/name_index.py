# name_index.py
# Name -> leaf lookup kept beside a MerkleTree.
#
# The index does not own leaves: entries are weak references, so a leaf
# released with its tree reads back as a miss instead of a stale object.
# verify() and tamper() never consult it; it is an accelerator for callers.

import logging
import weakref

from merkle_integrity.merkle import LeafNode, MerkleTree

logger = logging.getLogger(__name__)


class NameIndex:
    """
    Hash map from record name to leaf.

    put() never replaces: a repeated name chains a second entry, and get()
    resolves duplicates as last-inserted-wins.

    Example:
        index = NameIndex.from_tree(tree)
        leaf = index.get("ai.txt")
    """

    def __init__(self) -> None:
        self._chains: dict[str, list[weakref.ref[LeafNode]]] = {}

    @classmethod
    def from_tree(cls, tree: MerkleTree) -> "NameIndex":
        index = cls()
        for leaf in tree.leaves:
            index.put(leaf.name, leaf)
        return index

    def put(self, name: str, leaf: LeafNode) -> None:
        chain = self._chains.setdefault(name, [])
        if chain:
            logger.debug("name %r inserted again; %d entries now", name, len(chain) + 1)
        chain.append(weakref.ref(leaf))

    def entries(self, name: str) -> list[LeafNode]:
        """Live leaves stored under `name`, oldest first."""
        live: list[LeafNode] = []
        for ref in self._chains.get(name, []):
            leaf = ref()
            if leaf is not None:
                live.append(leaf)
        return live

    def get(self, name: str) -> LeafNode | None:
        live = self.entries(name)
        return live[-1] if live else None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return sum(1 for name in self._chains if self.get(name) is not None)
