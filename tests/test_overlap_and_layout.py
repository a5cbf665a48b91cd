import itertools
import unittest
from datetime import date

from engine.layout import calculate_shift_layout, cluster_shifts, layout_by_id
from engine.overlap import can_place_shift, find_conflicts, overlapping_peers, overlaps
from models.shift import Shift


DAY = date(2024, 12, 16)
NEXT_DAY = date(2024, 12, 17)


def _shift(shift_id, start, end, day=DAY):
    return Shift(id=shift_id, date=day, start_time=start, end_time=end)


class TestOverlap(unittest.TestCase):
    def test_touching_shifts_do_not_overlap(self):
        a = _shift("a", "09:00", "10:00")
        b = _shift("b", "10:00", "11:00")
        self.assertFalse(overlaps(a, b))
        self.assertFalse(overlaps(b, a))

    def test_partial_overlap(self):
        a = _shift("a", "09:00", "11:00")
        b = _shift("b", "10:00", "12:00")
        self.assertTrue(overlaps(a, b))

    def test_containment_overlaps(self):
        outer = _shift("a", "08:00", "18:00")
        inner = _shift("b", "12:00", "12:30")
        self.assertTrue(overlaps(outer, inner))

    def test_overlap_is_symmetric(self):
        shifts = [
            _shift("a", "09:00", "10:00"),
            _shift("b", "09:30", "11:00"),
            _shift("c", "10:00", "12:00"),
            _shift("d", "00:00", "24:00"),
            _shift("e", "13:00", "13:30"),
        ]
        for a, b in itertools.product(shifts, repeat=2):
            self.assertEqual(overlaps(a, b), overlaps(b, a))

    def test_peers_exclude_self_and_other_days(self):
        a = _shift("a", "09:00", "11:00")
        same_day = _shift("b", "10:00", "12:00")
        other_day = _shift("c", "10:00", "12:00", day=NEXT_DAY)
        touching = _shift("d", "11:00", "12:00")
        peers = overlapping_peers(a, [a, same_day, other_day, touching])
        self.assertEqual([p.id for p in peers], ["b"])

    def test_peers_exclude_moved_copy_of_self(self):
        a = _shift("a", "09:00", "11:00")
        moved = a.with_times("09:30", "11:30")
        self.assertEqual(overlapping_peers(moved, [a]), [])

    def test_can_place_shift(self):
        a = _shift("a", "09:00", "11:00")
        b = _shift("b", "10:00", "12:00")
        self.assertFalse(can_place_shift(b, [a]))
        self.assertTrue(can_place_shift(b, [a], allow_overlap=True))

    def test_find_conflicts(self):
        a = _shift("a", "09:00", "11:00")
        b = _shift("b", "10:00", "12:00")
        c = _shift("c", "12:00", "13:00")
        pairs = find_conflicts([a, b, c])
        self.assertEqual([(x.id, y.id) for x, y in pairs], [("a", "b")])


class TestColumnLayout(unittest.TestCase):
    def test_empty_input(self):
        self.assertEqual(cluster_shifts([]), [])
        self.assertEqual(calculate_shift_layout([]), [])

    def test_single_shift_gets_full_width(self):
        [item] = calculate_shift_layout([_shift("a", "09:00", "10:00")])
        self.assertEqual(item.column, 0)
        self.assertEqual(item.total_columns, 1)
        self.assertEqual(item.width_percent, 100.0)
        self.assertEqual(item.left_percent, 0.0)

    def test_touching_shifts_each_get_one_column(self):
        layout = calculate_shift_layout([
            _shift("a", "09:00", "10:00"),
            _shift("b", "10:00", "11:00"),
        ])
        self.assertEqual([item.total_columns for item in layout], [1, 1])
        self.assertEqual([item.cluster for item in layout], [0, 1])

    def test_three_mutually_overlapping_shifts(self):
        layout = calculate_shift_layout([
            _shift("a", "09:00", "12:00"),
            _shift("b", "09:00", "12:00"),
            _shift("c", "09:00", "12:00"),
        ])
        self.assertEqual([item.total_columns for item in layout], [3, 3, 3])
        self.assertEqual(sorted(item.column for item in layout), [0, 1, 2])

    def test_ties_keep_input_order(self):
        layout = calculate_shift_layout([
            _shift("late", "10:00", "11:00"),
            _shift("b", "09:00", "12:00"),
            _shift("a", "09:00", "12:00"),
        ])
        by_id = layout_by_id(layout)
        self.assertEqual(by_id["b"].column, 0)
        self.assertEqual(by_id["a"].column, 1)
        self.assertEqual(by_id["late"].column, 2)

    def test_transitive_cluster(self):
        # a and c never overlap but both overlap b
        a = _shift("a", "09:00", "11:00")
        b = _shift("b", "10:00", "13:00")
        c = _shift("c", "12:00", "14:00")
        clusters = cluster_shifts([c, b, a])
        self.assertEqual([[s.id for s in cluster] for cluster in clusters], [["a", "b", "c"]])

        by_id = layout_by_id(calculate_shift_layout([a, b, c]))
        self.assertEqual(by_id["c"].total_columns, 3)
        self.assertEqual(by_id["c"].column, 2)
        self.assertAlmostEqual(by_id["c"].left_percent, 200 / 3)

    def test_joins_first_cluster_it_overlaps(self):
        shifts = [
            _shift("a", "08:00", "09:00"),
            _shift("b", "10:00", "12:00"),
            _shift("c", "11:00", "11:30"),
            _shift("d", "15:00", "16:00"),
        ]
        clusters = cluster_shifts(shifts)
        self.assertEqual([[s.id for s in cl] for cl in clusters], [["a"], ["b", "c"], ["d"]])

    def test_columns_within_cluster_are_distinct_and_bounded(self):
        shifts = [
            _shift("s%d" % i, "%02d:00" % (8 + i % 3), "%02d:30" % (11 + i % 4))
            for i in range(12)
        ]
        layout = calculate_shift_layout(shifts)
        self.assertEqual(len(layout), len(shifts))
        seen = {}
        for item in layout:
            self.assertTrue(0 <= item.column < item.total_columns)
            key = (item.cluster, item.column)
            self.assertNotIn(key, seen)
            seen[key] = item.shift.id

    def test_pixel_positions(self):
        [item] = calculate_shift_layout([_shift("a", "09:00", "10:30")], day_start_minutes=480)
        self.assertEqual(item.top, 60)
        self.assertEqual(item.height, 90)
        self.assertEqual(item.to_dict()["id"], "a")


if __name__ == "__main__":
    unittest.main(verbosity=2)
