"""
Instrumented BST operations.

Every operation works on the tree it is given without mutating it and returns
the full list of ``AnimationStep`` objects describing its progress, ready to be
handed to a ``PlaybackController``. Code line numbers index into the listings
in ``bst.bst_pseudocode``.
"""

import logging
import random
from typing import Any, List, NamedTuple, Optional

from bst import bst_pseudocode as ops
from bst.bst_model import TreeNode, build_tree, clone_tree, find_min
from bst.bst_steps import (
    FOUND,
    INSERTING,
    REMOVING,
    VISITING,
    AnimationStep,
    PathAnnotator,
    TraversalAnnotator,
    make_step,
)

logger = logging.getLogger(__name__)

VALUE_MIN = 1
VALUE_MAX = 99

DEFAULT_INSERT_ORDER = (
    50, 30, 70, 15, 40, 60, 85,
    8, 22, 35, 45, 55, 65, 80, 95,
    4, 11, 20, 25,
    2, 1,
)


class SearchResult(NamedTuple):
    found: bool
    steps: List[AnimationStep]


class TreeResult(NamedTuple):
    root: Optional[TreeNode]
    steps: List[AnimationStep]


class ValueResult(NamedTuple):
    result: Optional[int]
    steps: List[AnimationStep]


class OperationOutcome(NamedTuple):
    steps: List[AnimationStep]
    tree: Optional[TreeNode]
    result: Any


# ---------- Point operations ----------

def search(root: Optional[TreeNode], value: int) -> SearchResult:
    ann = PathAnnotator()
    ann.emit(root, f"Searching for {value}")

    node = root
    parent = None
    while node is not None:
        ann.enter(parent, node.value)
        ann.emit_at(root, f"Visit node {node.value}", node.value, VISITING, 0)

        if value == node.value:
            ann.mark(node.value, FOUND)
            ann.emit_at(root, f"{node.value} == {value}. Found!", node.value, FOUND, 2)
            ann.emit_at(root, f"Value {value} is found.", node.value, FOUND, 3)
            return SearchResult(True, ann.steps)

        if value < node.value:
            ann.emit_at(root, f"{value} < {node.value}, go left", node.value, VISITING, 6)
            next_node = node.left
        else:
            ann.emit_at(root, f"{value} > {node.value}, go right", node.value, VISITING, 5)
            next_node = node.right
        parent = node.value
        node = next_node

    ann.emit(root, "Reached null", 0)
    ann.emit(root, f"{value} not found in tree", 1)
    return SearchResult(False, ann.steps)


def insert(root: Optional[TreeNode], value: int) -> TreeResult:
    if root is None:
        new_root = TreeNode(value)
        step = make_step(new_root, f"Insert {value} as root", [(value, INSERTING)], (), 1, value)
        return TreeResult(new_root, [step])

    working = clone_tree(root)
    ann = PathAnnotator()
    ann.emit(working, f"Inserting {value}")
    duplicate = False

    def descend(node, parent):
        nonlocal duplicate
        if node is None:
            # the leaf is attached silently, the branch steps already show the way
            ann.add_edge(parent, value)
            return TreeNode(value)

        ann.enter(parent, node.value)
        ann.emit_at(working, f"Compare {value} with {node.value}", node.value, VISITING, 0)
        if value < node.value:
            ann.emit_at(working, f"{value} < {node.value}, go left", node.value, VISITING, 2)
            node.left = descend(node.left, node.value)
        elif value > node.value:
            ann.emit_at(working, f"{value} > {node.value}, go right", node.value, VISITING, 4)
            node.right = descend(node.right, node.value)
        else:
            duplicate = True
        return node

    working = descend(working, None)

    if duplicate:
        ann.mark(value, FOUND)
        ann.emit_at(working, f"{value} already in tree", value, FOUND, None)
    else:
        ann.mark(value, INSERTING)
        ann.emit_at(working, f"Inserted {value}", value, INSERTING, 1)
    return TreeResult(working, ann.steps)


def remove(root: Optional[TreeNode], value: int) -> TreeResult:
    working = clone_tree(root)
    ann = PathAnnotator()
    ann.emit(working, f"Removing {value}")
    removed = False

    def delete(node, parent, target):
        nonlocal removed
        if node is None:
            ann.emit(working, f"{target} not found", 1)
            return None

        ann.enter(parent, node.value)
        ann.emit_at(working, f"Visit {node.value}", node.value, VISITING, 0)

        if target < node.value:
            ann.emit_at(working, f"{target} < {node.value}, go left", node.value, VISITING, 2)
            node.left = delete(node.left, node.value, target)
            return node
        if target > node.value:
            ann.emit_at(working, f"{target} > {node.value}, go right", node.value, VISITING, 4)
            node.right = delete(node.right, node.value, target)
            return node

        removed = True
        ann.mark(node.value, REMOVING)
        ann.emit_at(working, f"Found {node.value}, removing", node.value, REMOVING, 6)

        if node.left is None and node.right is None:
            ann.emit_at(working, f"{node.value} is a leaf, remove it", node.value, REMOVING, 7)
            return None
        if node.left is None or node.right is None:
            ann.emit_at(working, f"{node.value} has one child, replace", node.value, REMOVING, 8)
            return node.left if node.left is not None else node.right

        successor = find_min(node.right)
        ann.mark(successor.value, FOUND)
        ann.emit_at(working, f"Two children, find successor: {successor.value}", successor.value, FOUND, 9)
        ann.emit_at(working, f"Replace {node.value} with {successor.value}", node.value, REMOVING, 10)

        old_value = node.value
        node.value = successor.value
        ann.rename(old_value, node.value)
        ann.emit_at(working, f"Remove {node.value} from right subtree", node.value, FOUND, 11)
        node.right = delete(node.right, node.value, node.value)
        return node

    working = delete(working, None, value)

    if removed:
        ann.emit(working, "Removal complete")
    else:
        ann.emit(working, f"Removal complete, {value} not present")
    return TreeResult(working, ann.steps)


def find_predecessor(root: Optional[TreeNode], value: int) -> ValueResult:
    """Largest value in the tree strictly smaller than ``value``."""
    ann = PathAnnotator()
    ann.emit(root, f"Finding predecessor of {value}", 0)

    candidate = None
    node = root
    parent = None
    while node is not None:
        ann.enter(parent, node.value)
        ann.emit_at(root, f"Visit {node.value}", node.value, VISITING, 1)

        if value <= node.value:
            ann.emit_at(root, f"{value} <= {node.value}, go left", node.value, VISITING, 3)
            next_node = node.left
        else:
            ann.mark(node.value, FOUND)
            ann.emit_at(root, f"{value} > {node.value}, candidate", node.value, FOUND, 5)
            candidate = node.value
            next_node = node.right
        parent = node.value
        node = next_node

    if candidate is None:
        ann.emit(root, f"No predecessor for {value}", 7)
    else:
        ann.emit(root, f"Predecessor of {value} is {candidate}", 7)
    return ValueResult(candidate, ann.steps)


def find_successor(root: Optional[TreeNode], value: int) -> ValueResult:
    """Smallest value in the tree strictly greater than ``value``."""
    ann = PathAnnotator()
    ann.emit(root, f"Finding successor of {value}", 0)

    candidate = None
    node = root
    parent = None
    while node is not None:
        ann.enter(parent, node.value)
        ann.emit_at(root, f"Visit {node.value}", node.value, VISITING, 1)

        if value >= node.value:
            ann.emit_at(root, f"{value} >= {node.value}, go right", node.value, VISITING, 3)
            next_node = node.right
        else:
            ann.mark(node.value, FOUND)
            ann.emit_at(root, f"{value} < {node.value}, candidate", node.value, FOUND, 5)
            candidate = node.value
            next_node = node.left
        parent = node.value
        node = next_node

    if candidate is None:
        ann.emit(root, f"No successor for {value}", 7)
    else:
        ann.emit(root, f"Successor of {value} is {candidate}", 7)
    return ValueResult(candidate, ann.steps)


# ---------- Order statistics & traversals ----------

def select_kth(root: Optional[TreeNode], k: int) -> ValueResult:
    """
    k-th smallest value (1-indexed). The in-order walk stops as soon as the
    k-th node is reached. Non-positive k never matches and ends out of range.
    """
    ann = TraversalAnnotator()
    ann.emit(root, f"Select {k}-th smallest", 0)
    count = 0
    result = None

    def walk(node):
        nonlocal count, result
        if node is None or result is not None:
            return

        if node.left is not None:
            ann.add_edge(node.value, node.left.value)
        walk(node.left)
        if result is not None:
            return

        count += 1
        ann.visit(node.value, VISITING)
        ann.emit_at(root, f"Visit {node.value} (count={count})", node.value, VISITING, 2)

        if count == k:
            result = node.value
            ann.visit(node.value, FOUND)
            ann.emit_at(root, f"{k}-th smallest is {node.value}", node.value, FOUND, 4)
            return

        if node.right is not None:
            ann.add_edge(node.value, node.right.value)
        walk(node.right)

    walk(root)

    if result is None:
        ann.emit(root, f"k={k} is out of range", 6)
    else:
        ann.emit(root, f"Result: {result}", 6)
    return ValueResult(result, ann.steps)


# Order of the three actions per node; pseudocode lines follow the same order
# starting at line 2.
_TRAVERSAL_SEQUENCES = {
    ops.INORDER: ("left", "visit", "right"),
    ops.PREORDER: ("visit", "left", "right"),
    ops.POSTORDER: ("left", "right", "visit"),
}

_TRAVERSAL_LABELS = {
    ops.INORDER: "In-order",
    ops.PREORDER: "Pre-order",
    ops.POSTORDER: "Post-order",
}


def _traverse(root: Optional[TreeNode], order: str) -> List[AnimationStep]:
    sequence = _TRAVERSAL_SEQUENCES[order]
    label = _TRAVERSAL_LABELS[order]
    ann = TraversalAnnotator()

    def walk(node):
        if node is None:
            return
        for offset, action in enumerate(sequence):
            code_line = 2 + offset
            if action == "visit":
                ann.visit(node.value, FOUND)
                ann.emit_at(root, f"Visit {node.value} ({label.lower()})", node.value, FOUND, code_line)
                continue
            child = node.left if action == "left" else node.right
            ann.emit_at(root, f"Go {action} from {node.value}", node.value, VISITING, code_line)
            if child is not None:
                ann.add_edge(node.value, child.value)
            walk(child)

    walk(root)
    ann.emit(root, f"{label} traversal complete")
    return ann.steps


def inorder_traversal(root: Optional[TreeNode]) -> List[AnimationStep]:
    return _traverse(root, ops.INORDER)


def preorder_traversal(root: Optional[TreeNode]) -> List[AnimationStep]:
    return _traverse(root, ops.PREORDER)


def postorder_traversal(root: Optional[TreeNode]) -> List[AnimationStep]:
    return _traverse(root, ops.POSTORDER)


def traversal_order(root: Optional[TreeNode], order: str) -> List[int]:
    """Plain visit order for ``order`` without recording steps."""
    sequence = _TRAVERSAL_SEQUENCES[order]
    values: List[int] = []

    def walk(node):
        if node is None:
            return
        for action in sequence:
            if action == "visit":
                values.append(node.value)
            elif action == "left":
                walk(node.left)
            else:
                walk(node.right)

    walk(root)
    return values


# ---------- Builders ----------

def create_random_tree(size: int, rng: Optional[random.Random] = None) -> TreeResult:
    """
    Insert ``size`` distinct values drawn from VALUE_MIN..VALUE_MAX, recording
    every insert. ``size`` must stay well below the size of that range.
    """
    rng = rng or random.Random()
    values: List[int] = []
    seen = set()
    while len(values) < size:
        candidate = rng.randint(VALUE_MIN, VALUE_MAX)
        if candidate in seen:
            continue
        seen.add(candidate)
        values.append(candidate)
    logger.debug("create_random_tree: values=%s", values)

    root = None
    steps: List[AnimationStep] = []
    for value in values:
        root, inserted = insert(root, value)
        steps.extend(inserted)

    steps.append(make_step(root, f"Created BST with {size} nodes"))
    return TreeResult(root, steps)


def create_default_tree() -> Optional[TreeNode]:
    """
    Fixed 21-node tree of height 7, built without recording steps:

                         50
                  30            70
              15     40      60     85
            8  22  35  45  55  65 80  95
          4  11 20 25
        2
      1
    """
    return build_tree(DEFAULT_INSERT_ORDER)


# ---------- Dispatcher ----------

def run_operation(op: str, tree: Optional[TreeNode], value: Optional[int] = None) -> OperationOutcome:
    """
    Run ``op`` against ``tree`` and return its steps, the tree to keep once
    playback is over, and the operation's result. For ``create`` the value is
    the number of nodes to generate.
    """
    if op == ops.CREATE:
        new_root, steps = create_random_tree(value)
        outcome = OperationOutcome(steps, new_root, new_root)
    elif op == ops.SEARCH:
        found, steps = search(tree, value)
        outcome = OperationOutcome(steps, tree, found)
    elif op == ops.INSERT:
        new_root, steps = insert(tree, value)
        outcome = OperationOutcome(steps, new_root, None)
    elif op == ops.REMOVE:
        new_root, steps = remove(tree, value)
        outcome = OperationOutcome(steps, new_root, None)
    elif op == ops.PREDECESSOR:
        result, steps = find_predecessor(tree, value)
        outcome = OperationOutcome(steps, tree, result)
    elif op == ops.SUCCESSOR:
        result, steps = find_successor(tree, value)
        outcome = OperationOutcome(steps, tree, result)
    elif op == ops.SELECT_KTH:
        result, steps = select_kth(tree, value)
        outcome = OperationOutcome(steps, tree, result)
    elif op in _TRAVERSAL_SEQUENCES:
        steps = _traverse(tree, op)
        outcome = OperationOutcome(steps, tree, traversal_order(tree, op))
    else:
        raise ValueError(f"Unknown operation: {op!r}")

    logger.debug("run_operation: op=%s value=%s steps=%d", op, value, len(outcome.steps))
    return outcome
