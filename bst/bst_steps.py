"""
Step recording for the instrumented BST operations.

Two recorders share the same ``make_step`` primitive:

- ``PathAnnotator`` keeps a single root-to-node path. Point operations
  (search, insert, remove, predecessor, successor) overwrite its highlight
  kinds in place, so a node can go from visiting to found between steps.
- ``TraversalAnnotator`` only ever grows. Traversals and select-k-th use it
  so previously visited nodes and edges stay lit.

Every step snapshots the highlight state and deep-copies the tree, so later
mutation never leaks into steps that were already recorded.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from bst.bst_model import TreeNode, clone_tree

VISITING = "visiting"
FOUND = "found"
INSERTING = "inserting"
REMOVING = "removing"
PATH = "path"  # edge-only

HIGHLIGHT_KINDS = (VISITING, FOUND, INSERTING, REMOVING, PATH)

Edge = Tuple[int, int]


@dataclass(frozen=True)
class AnimationStep:
    highlighted_nodes: Dict[int, str] = field(default_factory=dict)
    highlighted_edges: List[Edge] = field(default_factory=list)
    tree: Optional[TreeNode] = None
    description: str = ""
    code_line: Optional[int] = None
    active_node: Optional[int] = None


def make_step(
    tree: Optional[TreeNode],
    description: str,
    highlights: Iterable[Tuple[int, str]] = (),
    edges: Iterable[Edge] = (),
    code_line: Optional[int] = None,
    active_node: Optional[int] = None,
) -> AnimationStep:
    return AnimationStep(
        highlighted_nodes=dict(highlights),
        highlighted_edges=list(edges),
        tree=clone_tree(tree),
        description=description,
        code_line=code_line,
        active_node=active_node,
    )


class _Annotator:
    def __init__(self):
        self.nodes: Dict[int, str] = {}
        self.edges: List[Edge] = []
        self.steps: List[AnimationStep] = []

    def add_edge(self, parent: Optional[int], child: int):
        if parent is not None:
            self.edges.append((parent, child))

    def emit(self, tree, description, code_line=None):
        """Record the current highlight state with no active node."""
        step = make_step(tree, description, self.nodes.items(), self.edges, code_line)
        self.steps.append(step)
        return step

    def emit_at(self, tree, description, node_value, kind, code_line):
        """Record a step focused on ``node_value``, drawn on top as ``kind``."""
        highlights = dict(self.nodes)
        highlights[node_value] = kind
        step = make_step(tree, description, highlights.items(), self.edges, code_line, node_value)
        self.steps.append(step)
        return step


class PathAnnotator(_Annotator):
    """Path-local highlights for point operations."""

    def mark(self, value: int, kind: str = VISITING):
        self.nodes[value] = kind

    def enter(self, parent: Optional[int], value: int):
        """Walk onto ``value`` from ``parent`` (None for the root)."""
        self.add_edge(parent, value)
        self.mark(value, VISITING)

    def rename(self, old: int, new: int):
        """A node took over another value; move its edges along with it."""
        kind = self.nodes.pop(old, None)
        if kind is not None:
            self.nodes.setdefault(new, kind)
        self.edges = [
            (new if parent == old else parent, new if child == old else child)
            for parent, child in self.edges
        ]


class TraversalAnnotator(_Annotator):
    """Append-only highlights for traversal-style operations."""

    def visit(self, value: int, kind: str = FOUND):
        # a visit can upgrade a node (visiting -> found) but never removes one
        self.nodes[value] = kind
