import unittest

from rip.selection import Selection


def selection_at(index, count):
    sel = Selection()
    sel.reconcile(count)
    for _ in range(index):
        sel.next()
    return sel


class TestNavigation(unittest.TestCase):
    def test_starts_empty(self):
        self.assertIsNone(Selection().index)

    def test_next_and_previous_are_noops_on_empty_list(self):
        sel = Selection()
        sel.next()
        sel.previous()
        self.assertIsNone(sel.index)

    def test_next_without_selection_picks_first(self):
        sel = Selection(count=3)
        sel.next()
        self.assertEqual(sel.index, 0)

    def test_previous_without_selection_picks_first(self):
        sel = Selection(count=3)
        sel.previous()
        self.assertEqual(sel.index, 0)

    def test_next_cycles_and_wraps(self):
        sel = selection_at(0, 3)
        seen = []
        for _ in range(4):
            sel.next()
            seen.append(sel.index)
        self.assertEqual(seen, [1, 2, 0, 1])

    def test_previous_cycles_and_wraps(self):
        sel = selection_at(0, 3)
        seen = []
        for _ in range(4):
            sel.previous()
            seen.append(sel.index)
        self.assertEqual(seen, [2, 1, 0, 2])

    def test_single_row_stays_put(self):
        sel = selection_at(0, 1)
        sel.next()
        self.assertEqual(sel.index, 0)
        sel.previous()
        self.assertEqual(sel.index, 0)

    def test_index_is_read_only(self):
        with self.assertRaises(AttributeError):
            Selection().index = 3


class TestReconcile(unittest.TestCase):
    def test_empty_list_clears_selection(self):
        sel = selection_at(2, 5)
        sel.reconcile(0)
        self.assertIsNone(sel.index)

    def test_out_of_range_is_clamped(self):
        sel = selection_at(4, 5)
        sel.reconcile(2)
        self.assertEqual(sel.index, 1)

    def test_no_selection_picks_first(self):
        sel = Selection()
        sel.reconcile(4)
        self.assertEqual(sel.index, 0)

    def test_in_range_is_preserved(self):
        sel = selection_at(2, 5)
        sel.reconcile(3)
        self.assertEqual(sel.index, 2)
        sel.reconcile(10)
        self.assertEqual(sel.index, 2)

    def test_empty_to_empty(self):
        sel = Selection()
        sel.reconcile(0)
        self.assertIsNone(sel.index)

    def test_navigation_uses_new_count(self):
        sel = selection_at(1, 2)
        sel.reconcile(4)
        sel.next()
        sel.next()
        sel.next()
        self.assertEqual(sel.index, 0)


if __name__ == "__main__":
    unittest.main()
