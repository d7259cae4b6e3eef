from types import MappingProxyType
from typing import NamedTuple, Tuple

CREATE = "create"
SEARCH = "search"
INSERT = "insert"
REMOVE = "remove"
PREDECESSOR = "predecessor"
SUCCESSOR = "successor"
SELECT_KTH = "selectKth"
INORDER = "inorder"
PREORDER = "preorder"
POSTORDER = "postorder"

# Operations that take a numeric argument from the user.
INPUT_OPERATIONS = (SEARCH, INSERT, REMOVE, PREDECESSOR, SUCCESSOR, SELECT_KTH)
TRAVERSAL_OPERATIONS = (INORDER, PREORDER, POSTORDER)


class PseudocodeEntry(NamedTuple):
    title: str
    lines: Tuple[str, ...]


_INSERT_LINES = (
    "if this == null",
    "  create new node",
    "else if value < this.key",
    "  go left",
    "else if value > this.key",
    "  go right",
)

PSEUDOCODE = MappingProxyType(
    {
        SEARCH: PseudocodeEntry(
            "Search",
            (
                "if this == null",
                "  return null",
                "else if this.key == search value",
                "  return this",
                "else if this.key < search value",
                "  search right",
                "else search left",
            ),
        ),
        INSERT: PseudocodeEntry("Insert", _INSERT_LINES),
        CREATE: PseudocodeEntry("Create", _INSERT_LINES),
        REMOVE: PseudocodeEntry(
            "Remove",
            (
                "if this == null",
                "  return (not found)",
                "else if value < this.key",
                "  go left",
                "else if value > this.key",
                "  go right",
                "else // found the node",
                "  if leaf node: remove it",
                "  if one child: bypass",
                "  if two children:",
                "    replace with successor",
                "    remove successor from right",
            ),
        ),
        INORDER: PseudocodeEntry(
            "In-Order Traversal",
            (
                "if node == null",
                "  return",
                "inorder(node.left)",
                "visit node",
                "inorder(node.right)",
            ),
        ),
        PREORDER: PseudocodeEntry(
            "Pre-Order Traversal",
            (
                "if node == null",
                "  return",
                "visit node",
                "preorder(node.left)",
                "preorder(node.right)",
            ),
        ),
        POSTORDER: PseudocodeEntry(
            "Post-Order Traversal",
            (
                "if node == null",
                "  return",
                "postorder(node.left)",
                "postorder(node.right)",
                "visit node",
            ),
        ),
        PREDECESSOR: PseudocodeEntry(
            "Predecessor",
            (
                "predecessor = null",
                "while node != null",
                "  if value <= node.key",
                "    go left",
                "  else",
                "    predecessor = node",
                "    go right",
                "return predecessor",
            ),
        ),
        SUCCESSOR: PseudocodeEntry(
            "Successor",
            (
                "successor = null",
                "while node != null",
                "  if value >= node.key",
                "    go right",
                "  else",
                "    successor = node",
                "    go left",
                "return successor",
            ),
        ),
        SELECT_KTH: PseudocodeEntry(
            "Select k-th",
            (
                "count = 0, result = null",
                "inorder(node.left)",
                "count++",
                "if count == k",
                "  result = node.key",
                "inorder(node.right)",
                "return result",
            ),
        ),
    }
)


def get_pseudocode(op: str) -> PseudocodeEntry:
    """Unknown operation kinds get an empty listing titled with the raw name."""
    entry = PSEUDOCODE.get(op)
    if entry is None:
        return PseudocodeEntry(title=op, lines=())
    return entry
