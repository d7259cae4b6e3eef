from typing import Iterable, List, Optional


class TreeNode:
    """
    Plain BST node. Values are unique small non-negative integers.
    """

    def __init__(self, value: int, left: Optional["TreeNode"] = None, right: Optional["TreeNode"] = None):
        self.value = value
        self.left = left
        self.right = right

    def __repr__(self):
        return f"TreeNode({self.value})"


def clone_tree(node: Optional[TreeNode]) -> Optional[TreeNode]:
    """Deep copy of a (sub)tree; cheap at the sizes this tool works with."""
    if node is None:
        return None
    return TreeNode(node.value, clone_tree(node.left), clone_tree(node.right))


def count_nodes(node: Optional[TreeNode]) -> int:
    if node is None:
        return 0
    return 1 + count_nodes(node.left) + count_nodes(node.right)


def tree_height(node: Optional[TreeNode]) -> int:
    if node is None:
        return 0
    return 1 + max(tree_height(node.left), tree_height(node.right))


def find_min(node: TreeNode) -> TreeNode:
    # caller guarantees node is not None
    current = node
    while current.left is not None:
        current = current.left
    return current


def find_max(node: TreeNode) -> TreeNode:
    current = node
    while current.right is not None:
        current = current.right
    return current


def contains(node: Optional[TreeNode], value: int) -> bool:
    current = node
    while current is not None:
        if value == current.value:
            return True
        current = current.left if value < current.value else current.right
    return False


def inorder_values(node: Optional[TreeNode]) -> List[int]:
    values: List[int] = []

    def walk(current):
        if current is None:
            return
        walk(current.left)
        values.append(current.value)
        walk(current.right)

    walk(node)
    return values


def is_valid_bst(node: Optional[TreeNode]) -> bool:
    """
    Checks the strict ordering invariant: every left descendant is smaller and
    every right descendant is larger than its ancestor.
    """

    def check(current, low, high):
        if current is None:
            return True
        if low is not None and current.value <= low:
            return False
        if high is not None and current.value >= high:
            return False
        return check(current.left, low, current.value) and check(current.right, current.value, high)

    return check(node, None, None)


def insert_silent(root: Optional[TreeNode], value: int) -> TreeNode:
    """
    Insert in place without recording anything. Duplicates are ignored.
    """
    if root is None:
        return TreeNode(value)
    if value < root.value:
        root.left = insert_silent(root.left, value)
    elif value > root.value:
        root.right = insert_silent(root.right, value)
    return root


def build_tree(values: Iterable[int]) -> Optional[TreeNode]:
    root: Optional[TreeNode] = None
    for value in values:
        root = insert_silent(root, value)
    return root
