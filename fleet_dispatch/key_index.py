"""
Ordered key index over non-negative integer capacities.

An AVL tree supporting predecessor/successor queries, used by the engine
to find the nearest lot above or below a requested capacity.

Design principles:
- O(log n) insert, delete, membership, predecessor, successor
- Recursive insert/delete return the (possibly rotated) subtree root
- Nodes are owned by exactly one tree; rotations only relink children
- Keys are >= 0 so NOT_FOUND (-1) never collides with a real key
"""

from __future__ import annotations

from typing import Iterable, Iterator


NOT_FOUND = -1


class _Node:
    """Single tree node. Height of a leaf is 1."""
    __slots__ = ("key", "height", "left", "right")

    def __init__(self, key: int) -> None:
        self.key = key
        self.height = 1
        self.left: _Node | None = None
        self.right: _Node | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Subtree helpers
# ─────────────────────────────────────────────────────────────────────────────

def _height(node: _Node | None) -> int:
    return node.height if node is not None else 0


def _balance(node: _Node | None) -> int:
    if node is None:
        return 0
    return _height(node.left) - _height(node.right)


def _update_height(node: _Node) -> None:
    node.height = max(_height(node.left), _height(node.right)) + 1


def _rotate_right(y: _Node) -> _Node:
    x = y.left
    y.left = x.right
    x.right = y
    _update_height(y)
    _update_height(x)
    return x


def _rotate_left(x: _Node) -> _Node:
    y = x.right
    x.right = y.left
    y.left = x
    _update_height(x)
    _update_height(y)
    return y


def _rebalance(node: _Node) -> _Node:
    """Restore the AVL property at node. Returns the new subtree root."""
    _update_height(node)
    balance = _balance(node)

    if balance > 1:
        if _balance(node.left) < 0:
            node.left = _rotate_left(node.left)
        return _rotate_right(node)

    if balance < -1:
        if _balance(node.right) > 0:
            node.right = _rotate_right(node.right)
        return _rotate_left(node)

    return node


def _insert(node: _Node | None, key: int) -> _Node:
    if node is None:
        return _Node(key)

    if key < node.key:
        node.left = _insert(node.left, key)
    elif key > node.key:
        node.right = _insert(node.right, key)
    else:
        return node

    return _rebalance(node)


def _delete(node: _Node | None, key: int) -> _Node | None:
    if node is None:
        return None

    if key < node.key:
        node.left = _delete(node.left, key)
    elif key > node.key:
        node.right = _delete(node.right, key)
    else:
        if node.left is None:
            return node.right
        if node.right is None:
            return node.left

        # Two children: take the in-order successor's key
        successor = node.right
        while successor.left is not None:
            successor = successor.left
        node.key = successor.key
        node.right = _delete(node.right, successor.key)

    return _rebalance(node)


def _check(node: _Node | None, low: int | None, high: int | None) -> int:
    """Return subtree height, or -1 if ordering, heights or balance are off."""
    if node is None:
        return 0
    if (low is not None and node.key <= low) or (high is not None and node.key >= high):
        return -1

    left = _check(node.left, low, node.key)
    right = _check(node.right, node.key, high)
    if left < 0 or right < 0 or abs(left - right) > 1:
        return -1

    height = max(left, right) + 1
    return height if height == node.height else -1


# ─────────────────────────────────────────────────────────────────────────────
# Ordered Key Index
# ─────────────────────────────────────────────────────────────────────────────

class OrderedKeyIndex:
    """
    Sorted set of capacity keys backed by an AVL tree.

    Insert of a present key and delete of an absent key are no-ops.
    Queries that find nothing return NOT_FOUND rather than raising.
    """

    def __init__(self, keys: Iterable[int] | None = None):
        self._root: _Node | None = None
        self._size: int = 0

        for key in keys or ():
            self.insert(key)

    def insert(self, key: int) -> bool:
        """Add key. Returns True if the index changed."""
        if key < 0:
            raise ValueError(f"Index keys must be non-negative, got {key}")
        if key in self:
            return False

        self._root = _insert(self._root, key)
        self._size += 1
        return True

    def delete(self, key: int) -> bool:
        """Remove key. Returns True if the index changed."""
        if key not in self:
            return False

        self._root = _delete(self._root, key)
        self._size -= 1
        return True

    def __contains__(self, key: int) -> bool:
        node = self._root
        while node is not None:
            if key == node.key:
                return True
            node = node.left if key < node.key else node.right
        return False

    def predecessor(self, key: int) -> int:
        """Largest stored key strictly less than key, or NOT_FOUND."""
        node = self._root
        result = NOT_FOUND

        while node is not None:
            if node.key < key:
                result = node.key
                node = node.right
            else:
                node = node.left

        return result

    def successor(self, key: int) -> int:
        """Smallest stored key strictly greater than key, or NOT_FOUND."""
        node = self._root
        result = NOT_FOUND

        while node is not None:
            if node.key > key:
                result = node.key
                node = node.left
            else:
                node = node.right

        return result

    def range_from(self, key: int) -> Iterator[int]:
        """
        Iterate stored keys >= key in ascending order.

        Lazy: only the path to the lower bound is visited up front, so
        stopping early costs O(log n + k).
        """
        stack: list[_Node] = []
        node = self._root

        # Push every node on the search path that is >= key
        while node is not None:
            if node.key >= key:
                stack.append(node)
                node = node.left
            else:
                node = node.right

        while stack:
            node = stack.pop()
            yield node.key

            child = node.right
            while child is not None:
                stack.append(child)
                child = child.left

    def __iter__(self) -> Iterator[int]:
        return self.range_from(0)

    def __len__(self) -> int:
        return self._size

    @property
    def height(self) -> int:
        return _height(self._root)

    def is_balanced(self) -> bool:
        """Verify ordering, cached heights and the AVL balance bound."""
        return _check(self._root, None, None) >= 0

    def clear(self) -> None:
        self._root = None
        self._size = 0

    def __repr__(self) -> str:
        return f"OrderedKeyIndex(size={self._size}, height={self.height})"
