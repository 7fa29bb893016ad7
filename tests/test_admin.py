import unittest
from datetime import datetime

from heec.auth import is_admin
from heec.extensions import db
from heec.models import ActionType, ActivityLog, EntityType, RoleType, User
from heec.results import ErrorKind
from heec.services.admin import get_activity_logs, get_all_users_for_admin, toggle_active_status

from support import DatabaseTestCase


class ToggleActiveStatusTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_admin()
        self.teacher = self.make_teacher("teacher@heec.ma")

    def test_admin_cannot_toggle_themselves(self) -> None:
        result = toggle_active_status(self.admin.id, self.admin.id)

        self.assertEqual(result.error, ErrorKind.SELF_MODIFICATION_FORBIDDEN)
        self.assertEqual(result.message, "Vous ne pouvez pas modifier votre propre statut")
        self.assertTrue(db.session.get(User, self.admin.id).active)
        self.assertEqual(ActivityLog.query.count(), 0)

    def test_inactive_admin_toggling_themselves_is_refused_as_non_admin(self) -> None:
        self.admin.active = False
        db.session.commit()

        result = toggle_active_status(self.admin.id, self.admin.id)

        self.assertEqual(result.error, ErrorKind.ACCESS_DENIED)
        self.assertFalse(db.session.get(User, self.admin.id).active)
        self.assertEqual(ActivityLog.query.count(), 0)

    def test_self_protection_holds_for_a_second_admin_role(self) -> None:
        director = self.make_user("dg@heec.ma", RoleType.DIRECTEUR_GENERAL)
        result = toggle_active_status(director.id, director.id)
        self.assertEqual(result.error, ErrorKind.SELF_MODIFICATION_FORBIDDEN)
        self.assertTrue(db.session.get(User, director.id).active)

    def test_toggle_flips_once_per_call(self) -> None:
        first = toggle_active_status(self.admin.id, self.teacher.id)
        self.assertTrue(first.success)
        self.assertFalse(db.session.get(User, self.teacher.id).active)

        second = toggle_active_status(self.admin.id, self.teacher.id)
        self.assertTrue(second.success)
        self.assertTrue(db.session.get(User, self.teacher.id).active)

        actions = [
            entry.action
            for entry in ActivityLog.query.order_by(ActivityLog.id).all()
        ]
        self.assertEqual(actions, [ActionType.DEACTIVATE, ActionType.ACTIVATE])

    def test_deactivated_admin_loses_rights(self) -> None:
        other_admin = self.make_admin("second@heec.ma")
        toggle_active_status(self.admin.id, other_admin.id)
        self.assertFalse(is_admin(other_admin.id))
        self.assertEqual(
            toggle_active_status(other_admin.id, self.teacher.id).error, ErrorKind.ACCESS_DENIED
        )

    def test_unknown_target(self) -> None:
        self.assertEqual(toggle_active_status(self.admin.id, 999).error, ErrorKind.NOT_FOUND)

    def test_non_admin_is_denied(self) -> None:
        other = self.make_teacher("other@heec.ma")
        self.assertEqual(
            toggle_active_status(self.teacher.id, other.id).error, ErrorKind.ACCESS_DENIED
        )


class AdminOverviewTestCase(DatabaseTestCase):
    def test_users_overview_requires_admin(self) -> None:
        admin = self.make_admin()
        teacher = self.make_teacher("teacher@heec.ma")

        self.assertEqual(get_all_users_for_admin(teacher.id).error, ErrorKind.ACCESS_DENIED)
        overview = get_all_users_for_admin(admin.id)
        self.assertTrue(overview.success)
        emails = {row["email"] for row in overview.data}
        self.assertEqual(emails, {"admin@heec.ma", "teacher@heec.ma"})
        teacher_row = next(row for row in overview.data if row["email"] == "teacher@heec.ma")
        self.assertEqual(teacher_row["roles"], ["ENSEIGNANT"])


class ActivityLogQueryTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_admin()
        entries = [
            (ActionType.CREATE, EntityType.DEPARTEMENT, datetime(2025, 3, 1, 9)),
            (ActionType.UPDATE, EntityType.DEPARTEMENT, datetime(2025, 3, 2, 9)),
            (ActionType.CREATE, EntityType.MODULE, datetime(2025, 3, 3, 9)),
            (ActionType.DELETE, EntityType.MODULE, datetime(2025, 3, 3, 18)),
        ]
        for action, entity_type, created_at in entries:
            db.session.add(
                ActivityLog(
                    user_id=self.admin.id,
                    action=action,
                    entity_type=entity_type,
                    description=f"{action.value} {entity_type.value}",
                    created_at=created_at,
                )
            )
        db.session.commit()

    def test_newest_first(self) -> None:
        result = get_activity_logs(self.admin.id)
        created = [entry.created_at for entry in result.data["items"]]
        self.assertEqual(created, sorted(created, reverse=True))
        self.assertEqual(result.data["pagination"]["total"], 4)

    def test_filters_combine(self) -> None:
        result = get_activity_logs(
            self.admin.id, {"entity_type": "MODULE", "start_date": "2025-03-03", "end_date": "2025-03-03"}
        )
        self.assertEqual(
            [entry.action for entry in result.data["items"]],
            [ActionType.DELETE, ActionType.CREATE],
        )
        only_updates = get_activity_logs(self.admin.id, {"action": "UPDATE"})
        self.assertEqual(only_updates.data["pagination"]["total"], 1)

    def test_pagination_and_invalid_filters(self) -> None:
        page = get_activity_logs(self.admin.id, {"page": 2, "limit": 3})
        self.assertEqual(len(page.data["items"]), 1)
        self.assertEqual(page.data["pagination"]["total_pages"], 2)

        self.assertEqual(
            get_activity_logs(self.admin.id, {"action": "EXPLODE"}).error,
            ErrorKind.VALIDATION_ERROR,
        )
        self.assertEqual(
            get_activity_logs(self.admin.id, {"limit": 500}).error, ErrorKind.VALIDATION_ERROR
        )

    def test_requires_admin(self) -> None:
        teacher = self.make_teacher("teacher@heec.ma")
        self.assertEqual(get_activity_logs(teacher.id).error, ErrorKind.ACCESS_DENIED)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
