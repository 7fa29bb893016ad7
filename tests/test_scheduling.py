import unittest
from datetime import date, datetime, time

from heec.extensions import db
from heec.scheduling import anchor, available_teachers_for_seance, has_conflict, overlaps

from support import DatabaseTestCase


DAY = date(2025, 3, 10)


def at(hour: int, minute: int = 0, day: date = DAY) -> datetime:
    return datetime.combine(day, time(hour, minute))


class OverlapTestCase(unittest.TestCase):
    def test_touching_intervals_do_not_overlap(self) -> None:
        self.assertFalse(overlaps(at(9), at(10), at(10), at(11)))
        self.assertFalse(overlaps(at(10), at(11), at(9), at(10)))

    def test_overlap_is_symmetric(self) -> None:
        cases = [
            (at(9), at(10), at(9, 30), at(10, 30)),
            (at(9), at(10), at(8), at(9, 30)),
            (at(9), at(12), at(10), at(11)),
            (at(9), at(10), at(11), at(12)),
            (at(9), at(10), at(9), at(10)),
        ]
        for first_start, first_end, second_start, second_end in cases:
            self.assertEqual(
                overlaps(first_start, first_end, second_start, second_end),
                overlaps(second_start, second_end, first_start, first_end),
            )

    def test_containment_and_identity_overlap(self) -> None:
        self.assertTrue(overlaps(at(9), at(12), at(10), at(11)))
        self.assertTrue(overlaps(at(9), at(10), at(9), at(10)))

    def test_anchor_moves_time_onto_day(self) -> None:
        self.assertEqual(anchor(DAY, time(8, 15)), at(8, 15))
        self.assertEqual(anchor(DAY, datetime(1970, 1, 1, 8, 15)), at(8, 15))


class ConflictCheckerTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        _, _, self.module = self.make_catalogue()
        self.teacher = self.make_teacher("teacher@heec.ma")
        self.existing = self.make_seance(self.teacher, self.module, DAY, time(9), time(10))

    def test_adjacent_slot_is_free(self) -> None:
        self.assertFalse(has_conflict(self.teacher.id, DAY, at(10), at(11)))
        self.assertFalse(has_conflict(self.teacher.id, DAY, at(8), at(9)))

    def test_partial_overlaps_conflict(self) -> None:
        self.assertTrue(has_conflict(self.teacher.id, DAY, at(9, 30), at(10, 30)))
        self.assertTrue(has_conflict(self.teacher.id, DAY, at(8), at(9, 30)))
        self.assertTrue(has_conflict(self.teacher.id, DAY, at(8), at(11)))

    def test_excluded_seance_does_not_conflict_with_itself(self) -> None:
        self.assertTrue(has_conflict(self.teacher.id, DAY, at(9), at(10)))
        self.assertFalse(
            has_conflict(self.teacher.id, DAY, at(9), at(10), exclude_seance_id=self.existing.id)
        )

    def test_other_day_and_other_teacher_are_ignored(self) -> None:
        other_day = date(2025, 3, 11)
        self.assertFalse(
            has_conflict(self.teacher.id, other_day, at(9, day=other_day), at(10, day=other_day))
        )
        colleague = self.make_teacher("colleague@heec.ma")
        self.assertFalse(has_conflict(colleague.id, DAY, at(9), at(10)))


class AvailableTeachersTestCase(DatabaseTestCase):
    def test_lists_free_active_assigned_teachers_sorted(self) -> None:
        _, _, module = self.make_catalogue()
        busy = self.make_teacher("busy@heec.ma", last_name="Alaoui")
        zahir = self.make_teacher("zahir@heec.ma", last_name="Zahir")
        bennani = self.make_teacher("bennani@heec.ma", last_name="Bennani")
        inactive = self.make_teacher("inactive@heec.ma", last_name="Chraibi")
        inactive.active = False
        outsider = self.make_teacher("outsider@heec.ma", last_name="Idrissi")
        module.teachers.extend([busy, zahir, bennani, inactive])
        db.session.commit()
        self.make_seance(busy, module, DAY, time(9), time(11))

        available = available_teachers_for_seance(module.id, DAY, at(10), at(12))

        self.assertEqual([teacher.last_name for teacher in available], ["Bennani", "Zahir"])
        self.assertNotIn(outsider, available)

    def test_unknown_module_returns_none(self) -> None:
        self.assertIsNone(available_teachers_for_seance(999, DAY, at(9), at(10)))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
