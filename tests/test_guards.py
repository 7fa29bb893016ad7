import unittest
from datetime import date, time

from heec.extensions import db
from heec.guards import can_delete, check_self_modification
from heec.models import ActionType, ActivityLog, Department, EntityType, RoleType
from heec.results import ErrorKind
from heec.services.departments import delete_department
from heec.services.modules import delete_module
from heec.services.roles import delete_role

from support import DatabaseTestCase


class ReferentialGuardTestCase(DatabaseTestCase):
    def test_department_with_filieres_cannot_be_deleted(self) -> None:
        department = self.make_department()
        first = self.make_filiere(department, "Finance")
        self.make_filiere(department, "Marketing")

        verdict = can_delete(EntityType.DEPARTEMENT, department.id)

        self.assertEqual(verdict.error, ErrorKind.HAS_DEPENDENTS)
        self.assertEqual(
            verdict.message,
            "Impossible de supprimer ce département car il contient 2 filière(s)",
        )
        self.assertEqual(verdict.data, {"dependent": "filière(s)", "count": 2})

        db.session.delete(first)
        db.session.commit()
        self.assertIn("1 filière(s)", can_delete(EntityType.DEPARTEMENT, department.id).message)

    def test_department_with_direct_users_cannot_be_deleted(self) -> None:
        department = self.make_department()
        user = self.make_teacher("teacher@heec.ma")
        user.department = department
        db.session.commit()

        verdict = can_delete(EntityType.DEPARTEMENT, department.id)
        self.assertIn("1 utilisateur(s)", verdict.message)

        user.department = None
        db.session.commit()
        self.assertTrue(can_delete(EntityType.DEPARTEMENT, department.id).success)

    def test_filiere_and_module_dependents(self) -> None:
        _, filiere, module = self.make_catalogue()
        teacher = self.make_teacher("teacher@heec.ma")
        self.make_seance(teacher, module, date(2025, 3, 10), time(9), time(10))

        filiere_verdict = can_delete(EntityType.FILIERE, filiere.id)
        self.assertEqual(
            filiere_verdict.message,
            "Impossible de supprimer cette filière car elle contient 1 module(s)",
        )
        module_verdict = can_delete(EntityType.MODULE, module.id)
        self.assertEqual(
            module_verdict.message,
            "Impossible de supprimer ce module car il contient 1 séance(s)",
        )

    def test_role_assigned_to_users(self) -> None:
        self.make_teacher("one@heec.ma")
        self.make_teacher("two@heec.ma")
        role = self.make_role(RoleType.ENSEIGNANT)

        verdict = can_delete(EntityType.ROLE, role.id)

        self.assertEqual(
            verdict.message, "Impossible de supprimer ce rôle car il est assigné à 2 utilisateur(s)"
        )

    def test_users_and_seances_are_never_blocked(self) -> None:
        _, _, module = self.make_catalogue()
        teacher = self.make_teacher("teacher@heec.ma")
        seance = self.make_seance(teacher, module, date(2025, 3, 10), time(9), time(10))
        self.assertTrue(can_delete(EntityType.USER, teacher.id).success)
        self.assertTrue(can_delete(EntityType.SEANCE, seance.id).success)

    def test_unknown_entity_is_not_found(self) -> None:
        verdict = can_delete(EntityType.FILIERE, 404)
        self.assertEqual(verdict.error, ErrorKind.NOT_FOUND)
        self.assertEqual(verdict.message, "Filière non trouvée")


class GuardedDeletionServiceTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_admin()

    def test_blocked_delete_leaves_row_and_log_untouched(self) -> None:
        department, _, _ = self.make_catalogue()

        result = delete_department(self.admin.id, department.id)

        self.assertEqual(result.error, ErrorKind.HAS_DEPENDENTS)
        self.assertIsNotNone(db.session.get(Department, department.id))
        self.assertEqual(ActivityLog.query.count(), 0)

    def test_empty_department_is_deleted_and_logged(self) -> None:
        department = self.make_department("Archives")

        result = delete_department(self.admin.id, department.id)

        self.assertTrue(result.success)
        self.assertIsNone(db.session.get(Department, department.id))
        entry = ActivityLog.query.one()
        self.assertEqual(entry.action, ActionType.DELETE)
        self.assertEqual(entry.entity_type, EntityType.DEPARTEMENT)
        self.assertEqual(entry.entity_name, "Archives")

    def test_module_and_role_deletion_go_through_the_guard(self) -> None:
        _, _, module = self.make_catalogue()
        teacher = self.make_teacher("teacher@heec.ma")
        self.make_seance(teacher, module, date(2025, 3, 10), time(9), time(10))

        self.assertEqual(delete_module(self.admin.id, module.id).error, ErrorKind.HAS_DEPENDENTS)
        teacher_role = self.make_role(RoleType.ENSEIGNANT)
        self.assertEqual(delete_role(self.admin.id, teacher_role.id).error, ErrorKind.HAS_DEPENDENTS)

    def test_non_admin_cannot_delete(self) -> None:
        department = self.make_department("Archives")
        teacher = self.make_teacher("teacher@heec.ma")
        result = delete_department(teacher.id, department.id)
        self.assertEqual(result.error, ErrorKind.ACCESS_DENIED)
        self.assertEqual(result.message, "Accès refusé - Droits administrateur requis")


class SelfModificationTestCase(unittest.TestCase):
    def test_same_actor_and_target_is_forbidden(self) -> None:
        verdict = check_self_modification(7, 7)
        self.assertEqual(verdict.error, ErrorKind.SELF_MODIFICATION_FORBIDDEN)
        self.assertTrue(check_self_modification(7, 8).success)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
