from typing import Iterator, Optional, Tuple

from bst.bst_model import TreeNode, count_nodes

NODE_RADIUS = 22
LEVEL_GAP = 80
PADDING_TOP = 60
PADDING_X = 40


class PositionedNode:
    """Render-only projection of a tree node; never fed back into algorithms."""

    def __init__(self, value, x, y, left=None, right=None):
        self.value = value
        self.x = x
        self.y = y
        self.left = left
        self.right = right

    def __repr__(self):
        return f"PositionedNode({self.value}, x={self.x:.1f}, y={self.y:.1f})"


def layout_tree(root: Optional[TreeNode], canvas_width: float) -> Optional[PositionedNode]:
    """
    x comes from the in-order rank spread across the usable width, y from the
    depth. A single node sits at the left padding.
    """
    if root is None:
        return None

    total = count_nodes(root)
    usable_width = canvas_width - PADDING_X * 2
    gap = usable_width / (total - 1) if total > 1 else 0
    rank = 0

    def place(node, depth):
        nonlocal rank
        if node is None:
            return None
        left = place(node.left, depth + 1)
        x = PADDING_X + rank * gap
        rank += 1
        right = place(node.right, depth + 1)
        return PositionedNode(node.value, x, PADDING_TOP + depth * LEVEL_GAP, left, right)

    return place(root, 0)


def iter_positioned(node: Optional[PositionedNode]) -> Iterator[PositionedNode]:
    if node is None:
        return
    yield node
    yield from iter_positioned(node.left)
    yield from iter_positioned(node.right)


def positioned_edges(node: Optional[PositionedNode]) -> Iterator[Tuple[PositionedNode, PositionedNode]]:
    for parent in iter_positioned(node):
        for child in (parent.left, parent.right):
            if child is not None:
                yield parent, child
