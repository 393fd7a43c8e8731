"""Generalizable Tree Node Class with weak parent links."""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator


class TreeNode:
    """
    A general tree node class that can be extended for various applications.

    A node owns its children. The parent link is a weak reference so a tree is
    released as soon as its root is dropped, without relying on cycle collection.
    """

    def __init__(
        self,
        data: Any,  # noqa: ANN401
        children: list[TreeNode] | None = None,
        parent: TreeNode | None = None,
    ):
        """Initialize the tree node with data and optional children."""
        self.data = data
        self.children: list[TreeNode] = []
        self._parent_ref: weakref.ReferenceType[TreeNode] | None = None
        self.parent = parent
        for child in children or []:
            TreeNode.add_child(self, child)

    @property
    def parent(self) -> TreeNode | None:
        """Return the parent node, or None for a root (or a node whose tree was dropped)."""
        return self._parent_ref() if self._parent_ref is not None else None

    @parent.setter
    def parent(self, node: TreeNode | None) -> None:
        self._parent_ref = weakref.ref(node) if node is not None else None

    def get_num_children(self) -> int:
        """Return the number of children."""
        return len(self.children)

    def get_children(self) -> Iterator[TreeNode]:
        """Return an iterator over the children."""
        return iter(self.children)

    def add_child(self, child: TreeNode) -> None:
        """Add a child to this node."""
        child.parent = self
        self.children.append(child)

    def is_leaf(self) -> bool:
        """Check if this node is a leaf (has no children)."""
        return len(self.children) == 0

    def is_root(self) -> bool:
        """Check if this node is a root (has no parent)."""
        return self.parent is None

    def path_to_root(self) -> Iterator[TreeNode]:
        """Yield this node and then every ancestor up to the root."""
        node: TreeNode | None = self
        while node is not None:
            yield node
            node = node.parent

    def depth(self) -> int:
        """Return the number of edges between this node and the root."""
        return sum(1 for _ in self.path_to_root()) - 1

    def __str__(self) -> str:
        """Return a string representation of the node."""
        return f"TreeNode(data={self.data}, num_children={self.get_num_children()})"

    def __repr__(self) -> str:
        """Return a string representation of the node."""
        return self.__str__()

    def __iter__(self) -> Iterator[TreeNode]:
        """Return an iterator over the children."""
        return self.get_children()
