import sys
import os
import random
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from bst import bst_pseudocode as ops
from bst.bst_algorithms import (
    DEFAULT_INSERT_ORDER,
    VALUE_MAX,
    VALUE_MIN,
    create_default_tree,
    create_random_tree,
    find_predecessor,
    find_successor,
    inorder_traversal,
    insert,
    postorder_traversal,
    preorder_traversal,
    remove,
    run_operation,
    search,
    select_kth,
    traversal_order,
)
from bst.bst_model import (
    TreeNode,
    build_tree,
    contains,
    count_nodes,
    inorder_values,
    is_valid_bst,
    tree_height,
)
from bst.bst_pseudocode import get_pseudocode
from bst.bst_steps import FOUND, INSERTING, REMOVING, VISITING


def _shape(node):
    if node is None:
        return None
    return (node.value, _shape(node.left), _shape(node.right))


class TestDefaultTree(unittest.TestCase):

    def setUp(self):
        self.tree = create_default_tree()

    def test_shape(self):
        self.assertEqual(count_nodes(self.tree), 21)
        self.assertEqual(tree_height(self.tree), 7)
        self.assertEqual(inorder_values(self.tree), sorted(DEFAULT_INSERT_ORDER))

    def test_predecessor_of_30(self):
        self.assertEqual(find_predecessor(self.tree, 30).result, 25)

    def test_first_smallest(self):
        self.assertEqual(select_kth(self.tree, 1).result, 1)

    def test_inorder_visits_sorted(self):
        steps = inorder_traversal(self.tree)
        visits = [s.active_node for s in steps if s.description.startswith("Visit")]
        self.assertEqual(visits, sorted(DEFAULT_INSERT_ORDER))


class TestSearch(unittest.TestCase):

    def setUp(self):
        self.tree = create_default_tree()

    def test_found_iff_present(self):
        for value in range(0, 101):
            result = search(self.tree, value)
            self.assertEqual(result.found, value in DEFAULT_INSERT_ORDER, value)

    def test_found_trace(self):
        found, steps = search(self.tree, 45)
        self.assertTrue(found)
        # opening + (visit, branch) for 50, 30, 40 + visit 45 + two closing steps
        self.assertEqual(len(steps), 10)
        self.assertEqual(steps[0].description, "Searching for 45")
        self.assertEqual(steps[-2].code_line, 2)
        self.assertEqual(steps[-1].code_line, 3)
        self.assertEqual(steps[-1].description, "Value 45 is found.")
        self.assertEqual(steps[-1].highlighted_edges, [(50, 30), (30, 40), (40, 45)])
        self.assertEqual(steps[-1].highlighted_nodes[45], FOUND)
        self.assertEqual(steps[-1].highlighted_nodes[50], VISITING)

    def test_highlight_is_upgraded_on_match(self):
        _, steps = search(self.tree, 45)
        visit_45 = next(s for s in steps if s.description == "Visit node 45")
        self.assertEqual(visit_45.highlighted_nodes[45], VISITING)
        self.assertEqual(visit_45.code_line, 0)
        self.assertEqual(steps[-1].highlighted_nodes[45], FOUND)

    def test_directional_steps(self):
        _, steps = search(self.tree, 45)
        self.assertEqual(steps[2].description, "45 < 50, go left")
        self.assertEqual(steps[2].code_line, 6)
        self.assertEqual(steps[4].description, "45 > 30, go right")
        self.assertEqual(steps[4].code_line, 5)

    def test_not_found_trace(self):
        found, steps = search(self.tree, 42)
        self.assertFalse(found)
        self.assertEqual(steps[-2].description, "Reached null")
        self.assertEqual(steps[-2].code_line, 0)
        self.assertEqual(steps[-1].description, "42 not found in tree")
        self.assertEqual(steps[-1].code_line, 1)

    def test_empty_tree(self):
        found, steps = search(None, 3)
        self.assertFalse(found)
        self.assertEqual([s.description for s in steps], ["Searching for 3", "Reached null", "3 not found in tree"])
        self.assertTrue(all(s.tree is None for s in steps))

    def test_root_has_no_edge(self):
        _, steps = search(self.tree, 50)
        self.assertTrue(all(s.highlighted_edges == [] for s in steps))


class TestInsert(unittest.TestCase):

    def setUp(self):
        self.tree = create_default_tree()

    def test_insert_into_empty(self):
        root, steps = insert(None, 9)
        self.assertEqual(root.value, 9)
        self.assertEqual(len(steps), 1)
        self.assertEqual(steps[0].description, "Insert 9 as root")
        self.assertEqual(steps[0].highlighted_nodes, {9: INSERTING})
        self.assertEqual(steps[0].code_line, 1)

    def test_does_not_mutate_input(self):
        before = _shape(self.tree)
        root, _ = insert(self.tree, 42)
        self.assertEqual(_shape(self.tree), before)
        self.assertFalse(contains(self.tree, 42))
        self.assertTrue(contains(root, 42))
        self.assertIsNot(root, self.tree)

    def test_new_leaf_position_and_closing_step(self):
        root, steps = insert(self.tree, 42)
        # 50 -> 30 -> 40 -> 45 -> left
        self.assertEqual(root.left.right.right.left.value, 42)
        last = steps[-1]
        self.assertEqual(last.description, "Inserted 42")
        self.assertEqual(last.highlighted_nodes[42], INSERTING)
        self.assertEqual(last.highlighted_edges, [(50, 30), (30, 40), (40, 45), (45, 42)])
        self.assertTrue(contains(last.tree, 42))

    def test_descent_steps_show_tree_before_attach(self):
        _, steps = insert(self.tree, 42)
        compare_steps = [s for s in steps if s.description.startswith("Compare")]
        self.assertEqual([s.active_node for s in compare_steps], [50, 30, 40, 45])
        self.assertTrue(all(s.code_line == 0 for s in compare_steps))
        self.assertTrue(all(not contains(s.tree, 42) for s in compare_steps))

    def test_duplicate_is_noop(self):
        root, steps = insert(self.tree, 40)
        self.assertEqual(count_nodes(root), 21)
        self.assertTrue(is_valid_bst(root))
        self.assertEqual(steps[-1].description, "40 already in tree")

    def test_bst_invariant_after_many_inserts(self):
        rng = random.Random(3)
        root = None
        for _ in range(40):
            root, _ = insert(root, rng.randint(0, 60))
            self.assertTrue(is_valid_bst(root))


class TestRemove(unittest.TestCase):

    def setUp(self):
        self.tree = create_default_tree()

    def test_remove_present_shrinks_by_one(self):
        for value in DEFAULT_INSERT_ORDER:
            root, _ = remove(self.tree, value)
            self.assertEqual(count_nodes(root), 20, value)
            self.assertFalse(contains(root, value))
            self.assertTrue(is_valid_bst(root))

    def test_remove_absent_keeps_count(self):
        root, steps = remove(self.tree, 99)
        self.assertEqual(count_nodes(root), 21)
        self.assertIn("99 not found", [s.description for s in steps])
        self.assertEqual(steps[-1].description, "Removal complete, 99 not present")

    def test_does_not_mutate_input(self):
        before = _shape(self.tree)
        remove(self.tree, 50)
        remove(self.tree, 1)
        self.assertEqual(_shape(self.tree), before)

    def test_remove_root_with_two_children(self):
        root, steps = remove(self.tree, 50)
        # successor is the minimum of the right subtree
        self.assertEqual(root.value, 55)
        self.assertEqual(inorder_values(root).count(55), 1)
        self.assertEqual(root.right.left.left, None)
        code_lines = [s.code_line for s in steps]
        for line in (6, 9, 10, 11):
            self.assertIn(line, code_lines)
        self.assertEqual(steps[-1].description, "Removal complete")

    def test_remove_leaf(self):
        root, steps = remove(self.tree, 1)
        self.assertIsNone(root.left.left.left.left.left.left)
        self.assertIn("1 is a leaf, remove it", [s.description for s in steps])

    def test_remove_one_child_splices(self):
        root, steps = remove(self.tree, 2)
        self.assertEqual(root.left.left.left.left.left.value, 1)
        self.assertIn("2 has one child, replace", [s.description for s in steps])
        removing = next(s for s in steps if s.description == "Found 2, removing")
        self.assertEqual(removing.highlighted_nodes[2], REMOVING)

    def test_remove_only_node(self):
        root, steps = remove(TreeNode(5), 5)
        self.assertIsNone(root)
        self.assertIsNone(steps[-1].tree)

    def test_remove_from_empty(self):
        root, steps = remove(None, 5)
        self.assertIsNone(root)
        self.assertEqual(steps[-1].description, "Removal complete, 5 not present")


class TestPredecessorSuccessor(unittest.TestCase):

    def setUp(self):
        self.tree = create_default_tree()
        self.values = sorted(DEFAULT_INSERT_ORDER)

    def test_predecessor_bounds(self):
        for value in range(0, 101):
            smaller = [v for v in self.values if v < value]
            expected = max(smaller) if smaller else None
            self.assertEqual(find_predecessor(self.tree, value).result, expected, value)

    def test_successor_bounds(self):
        for value in range(0, 101):
            larger = [v for v in self.values if v > value]
            expected = min(larger) if larger else None
            self.assertEqual(find_successor(self.tree, value).result, expected, value)

    def test_no_predecessor_message(self):
        result, steps = find_predecessor(self.tree, 1)
        self.assertIsNone(result)
        self.assertEqual(steps[-1].description, "No predecessor for 1")
        self.assertEqual(steps[-1].code_line, 7)

    def test_successor_message(self):
        result, steps = find_successor(self.tree, 30)
        self.assertEqual(result, 35)
        self.assertEqual(steps[0].description, "Finding successor of 30")
        self.assertEqual(steps[-1].description, "Successor of 30 is 35")

    def test_candidates_marked_found(self):
        _, steps = find_predecessor(self.tree, 30)
        candidates = [s for s in steps if s.description.endswith("candidate")]
        self.assertEqual([s.active_node for s in candidates], [15, 22, 25])
        self.assertTrue(all(s.code_line == 5 for s in candidates))
        self.assertEqual(steps[-1].highlighted_nodes[25], FOUND)

    def test_empty_tree(self):
        self.assertIsNone(find_successor(None, 4).result)


class TestSelectKth(unittest.TestCase):

    def setUp(self):
        self.tree = create_default_tree()

    def test_matches_sorted_rank(self):
        ordered = sorted(DEFAULT_INSERT_ORDER)
        for k in range(1, len(ordered) + 1):
            self.assertEqual(select_kth(self.tree, k).result, ordered[k - 1], k)

    def test_out_of_range(self):
        for k in (0, -3, 22):
            result, steps = select_kth(self.tree, k)
            self.assertIsNone(result)
            self.assertEqual(steps[-1].description, f"k={k} is out of range")

    def test_stops_after_match(self):
        _, steps = select_kth(self.tree, 1)
        # opening, visit 1, match, result
        self.assertEqual(len(steps), 4)
        self.assertEqual(steps[-1].description, "Result: 1")

    def test_no_visits_after_match(self):
        _, steps = select_kth(self.tree, 3)
        visits = [s.active_node for s in steps if s.description.startswith("Visit")]
        self.assertEqual(visits, [1, 2, 4])

    def test_highlights_are_cumulative(self):
        _, steps = select_kth(self.tree, 10)
        sizes = [len(s.highlighted_nodes) for s in steps]
        self.assertEqual(sizes, sorted(sizes))


class TestTraversals(unittest.TestCase):

    def setUp(self):
        self.tree = create_default_tree()

    def test_preorder_parent_before_children(self):
        order = traversal_order(self.tree, ops.PREORDER)
        self._assert_parent_relation(self.tree, order, before=True)

    def test_postorder_parent_after_children(self):
        order = traversal_order(self.tree, ops.POSTORDER)
        self._assert_parent_relation(self.tree, order, before=False)

    def _assert_parent_relation(self, node, order, before):
        if node is None:
            return
        for child in (node.left, node.right):
            if child is None:
                continue
            if before:
                self.assertLess(order.index(node.value), order.index(child.value))
            else:
                self.assertGreater(order.index(node.value), order.index(child.value))
            self._assert_parent_relation(child, order, before)

    def test_step_visits_match_plain_order(self):
        for steps_fn, order in (
            (inorder_traversal, ops.INORDER),
            (preorder_traversal, ops.PREORDER),
            (postorder_traversal, ops.POSTORDER),
        ):
            steps = steps_fn(self.tree)
            visits = [s.active_node for s in steps if s.description.startswith("Visit")]
            self.assertEqual(visits, traversal_order(self.tree, order))

    def test_highlights_only_grow(self):
        steps = postorder_traversal(self.tree)
        for previous, current in zip(steps, steps[1:]):
            self.assertLessEqual(set(previous.highlighted_edges), set(current.highlighted_edges))
            visited_before = {v for v, kind in previous.highlighted_nodes.items() if kind == FOUND and v != previous.active_node}
            self.assertLessEqual(visited_before, set(current.highlighted_nodes))

    def test_closing_step(self):
        steps = preorder_traversal(self.tree)
        self.assertEqual(steps[-1].description, "Pre-order traversal complete")
        self.assertEqual(len(steps[-1].highlighted_nodes), 21)
        self.assertEqual(len(steps[-1].highlighted_edges), 20)

    def test_code_lines_follow_order(self):
        steps = inorder_traversal(build_tree([2, 1, 3]))
        self.assertEqual(
            [(s.description, s.code_line) for s in steps[:4]],
            [
                ("Go left from 2", 2),
                ("Go left from 1", 2),
                ("Visit 1 (in-order)", 3),
                ("Go right from 1", 4),
            ],
        )

    def test_empty_tree(self):
        steps = inorder_traversal(None)
        self.assertEqual(len(steps), 1)
        self.assertEqual(steps[0].description, "In-order traversal complete")


class TestBuilders(unittest.TestCase):

    def test_random_tree(self):
        root, steps = create_random_tree(8, random.Random(7))
        values = inorder_values(root)
        self.assertEqual(len(values), 8)
        self.assertEqual(len(set(values)), 8)
        self.assertTrue(all(VALUE_MIN <= v <= VALUE_MAX for v in values))
        self.assertTrue(is_valid_bst(root))
        self.assertEqual(steps[0].description, f"Insert {steps[0].active_node} as root")
        self.assertEqual(steps[-1].description, "Created BST with 8 nodes")

    def test_random_tree_is_reproducible(self):
        first, _ = create_random_tree(6, random.Random(11))
        second, _ = create_random_tree(6, random.Random(11))
        self.assertEqual(_shape(first), _shape(second))

    def test_random_tree_of_zero(self):
        root, steps = create_random_tree(0, random.Random(1))
        self.assertIsNone(root)
        self.assertEqual(len(steps), 1)


class TestStepSnapshots(unittest.TestCase):

    def test_steps_hold_independent_copies(self):
        tree = create_default_tree()
        _, steps = search(tree, 45)
        self.assertIsNot(steps[0].tree, tree)
        tree.left = None
        self.assertEqual(count_nodes(steps[0].tree), 21)
        self.assertIsNot(steps[0].tree, steps[1].tree)

    def test_code_lines_within_pseudocode(self):
        tree = create_default_tree()
        for op in ops.INPUT_OPERATIONS + ops.TRAVERSAL_OPERATIONS:
            outcome = run_operation(op, tree, 40)
            line_count = len(get_pseudocode(op).lines)
            for step in outcome.steps:
                if step.code_line is not None:
                    self.assertLess(step.code_line, line_count, (op, step.description))


class TestRunOperation(unittest.TestCase):

    def test_dispatch(self):
        tree = create_default_tree()
        self.assertTrue(run_operation(ops.SEARCH, tree, 45).result)
        self.assertEqual(run_operation(ops.SELECT_KTH, tree, 2).result, 2)
        self.assertEqual(run_operation(ops.INORDER, tree).result, sorted(DEFAULT_INSERT_ORDER))

        removed = run_operation(ops.REMOVE, tree, 50)
        self.assertEqual(count_nodes(removed.tree), 20)
        self.assertIs(run_operation(ops.SUCCESSOR, tree, 50).tree, tree)

    def test_create_uses_value_as_size(self):
        outcome = run_operation(ops.CREATE, None, 5)
        self.assertEqual(count_nodes(outcome.tree), 5)

    def test_unknown_operation(self):
        with self.assertRaises(ValueError):
            run_operation("rotate", None, 1)


if __name__ == "__main__":
    unittest.main()
