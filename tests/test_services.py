import unittest
from datetime import date, time

from heec.assignments import assign_teacher_to_filiere
from heec.extensions import db
from heec.models import ActionType, ActivityLog, RoleType, SeanceType, User
from heec.results import ErrorKind
from heec.services import departments, filieres, modules, roles, users

from support import DatabaseTestCase


class DepartmentServiceTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_admin()

    def test_create_update_and_log(self) -> None:
        created = departments.create_department(
            self.admin.id, {"name": "  Gestion ", "description": "Sciences de gestion"}
        )
        self.assertTrue(created.success, created.message)
        self.assertEqual(created.data.name, "Gestion")

        updated = departments.update_department(
            self.admin.id, created.data.id, {"description": "Management"}
        )
        self.assertTrue(updated.success, updated.message)
        self.assertEqual(updated.data.name, "Gestion")
        self.assertEqual(updated.data.description, "Management")

        actions = [entry.action for entry in ActivityLog.query.order_by(ActivityLog.id)]
        self.assertEqual(actions, [ActionType.CREATE, ActionType.UPDATE])
        update_entry = ActivityLog.query.filter_by(action=ActionType.UPDATE).one()
        self.assertEqual(update_entry.details, {"fields": {"description": "Management"}})

    def test_duplicate_name_is_rejected(self) -> None:
        departments.create_department(self.admin.id, {"name": "Gestion"})
        duplicate = departments.create_department(self.admin.id, {"name": "gestion"})
        self.assertEqual(duplicate.error, ErrorKind.VALIDATION_ERROR)

    def test_name_is_required(self) -> None:
        result = departments.create_department(self.admin.id, {"description": "Sans nom"})
        self.assertEqual(result.error, ErrorKind.VALIDATION_ERROR)
        self.assertIn("name", result.data["errors"])

    def test_listing_search_sort_and_pagination(self) -> None:
        for name in ("Gestion", "Informatique", "Langues", "Marketing"):
            self.make_department(name)

        page = departments.get_departments({"limit": 3, "sort_by": "name", "sort_order": "asc"})
        self.assertEqual([item.name for item in page.data["items"]], ["Gestion", "Informatique", "Langues"])
        self.assertEqual(
            page.data["pagination"], {"page": 1, "limit": 3, "total": 4, "total_pages": 2}
        )

        found = departments.get_departments({"search": "info"})
        self.assertEqual([item.name for item in found.data["items"]], ["Informatique"])

        bad_sort = departments.get_departments({"sort_by": "password_hash"})
        self.assertEqual(bad_sort.error, ErrorKind.VALIDATION_ERROR)
        bad_page = departments.get_departments({"page": 0})
        self.assertEqual(bad_page.error, ErrorKind.VALIDATION_ERROR)

    def test_stats(self) -> None:
        department, filiere, _ = self.make_catalogue()
        self.make_module(filiere, code="FIN102", name="Audit")
        stats = departments.get_department_stats(department.id).data
        self.assertEqual(stats["filieres"], 1)
        self.assertEqual(stats["total_modules"], 2)


class FiliereAndModuleServiceTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_admin()
        self.department = self.make_department()

    def test_filiere_requires_existing_department(self) -> None:
        missing = filieres.create_filiere(self.admin.id, {"name": "Finance", "department_id": 99})
        self.assertEqual(missing.error, ErrorKind.NOT_FOUND)

        created = filieres.create_filiere(
            self.admin.id, {"name": "Finance", "department_id": self.department.id}
        )
        self.assertTrue(created.success, created.message)
        self.assertEqual(
            [filiere.name for filiere in filieres.get_filieres_by_department(self.department.id).data],
            ["Finance"],
        )

    def test_moving_filiere_carries_its_members(self) -> None:
        filiere = self.make_filiere(self.department)
        other = self.make_department("Ingénierie")
        teacher = self.make_teacher("teacher@heec.ma")
        self.assertTrue(assign_teacher_to_filiere(self.admin.id, teacher.id, filiere.id).success)

        moved = filieres.update_filiere(self.admin.id, filiere.id, {"department_id": other.id})

        self.assertTrue(moved.success, moved.message)
        db.session.expire_all()
        refreshed = db.session.get(User, teacher.id)
        self.assertEqual(refreshed.filiere.department_id, other.id)
        self.assertEqual(refreshed.department_id, other.id)
        self.assertEqual(
            [user.id for user in users.get_users_by_department(other.id).data], [teacher.id]
        )

    def test_unknown_target_department_leaves_members_untouched(self) -> None:
        filiere = self.make_filiere(self.department)
        teacher = self.make_teacher("teacher@heec.ma")
        assign_teacher_to_filiere(self.admin.id, teacher.id, filiere.id)

        result = filieres.update_filiere(self.admin.id, filiere.id, {"department_id": 999})

        self.assertEqual(result.error, ErrorKind.NOT_FOUND)
        db.session.expire_all()
        self.assertEqual(db.session.get(User, teacher.id).department_id, self.department.id)
    def test_module_validation(self) -> None:
        filiere = self.make_filiere(self.department)
        negative = modules.create_module(
            self.admin.id,
            {"name": "Audit", "code": "AUD", "credits": 0, "filiere_id": filiere.id},
        )
        self.assertEqual(negative.error, ErrorKind.VALIDATION_ERROR)
        self.assertIn("credits", negative.data["errors"])

        created = modules.create_module(
            self.admin.id,
            {"name": "Audit", "code": "AUD", "credits": 4, "hours": 20, "filiere_id": filiere.id},
        )
        self.assertTrue(created.success, created.message)
        self.assertEqual(created.data.credits, 4)

    def test_module_stats_and_teacher_lookup(self) -> None:
        filiere = self.make_filiere(self.department)
        module = self.make_module(filiere)
        teacher = self.make_teacher("teacher@heec.ma")
        module.teachers.append(teacher)
        db.session.commit()
        self.make_seance(teacher, module, date(2025, 3, 10), time(9), time(11))
        self.make_seance(teacher, module, date(2025, 3, 11), time(9), time(10, 30), SeanceType.TD)

        stats = modules.get_module_stats(module.id).data
        self.assertEqual(stats["delivered_hours"], 3.5)
        self.assertEqual(stats["remaining_hours"], 26.5)
        self.assertEqual(stats["seances_by_type"]["COURS"], 1)
        self.assertEqual(stats["seances_by_type"]["TD"], 1)
        self.assertEqual(stats["seances_by_type"]["EXAMEN"], 0)

        self.assertEqual(modules.get_modules_by_teacher(teacher.id).data, [module])

        filiere_stats = filieres.get_filiere_stats(filiere.id).data
        self.assertEqual(filiere_stats["total_seances"], 2)
        self.assertEqual(filiere_stats["total_teachers"], 1)


class UserServiceTestCase(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_admin()

    def _payload(self, **overrides) -> dict:
        values = {
            "first_name": "Sara",
            "last_name": "Tazi",
            "email": "Sara.Tazi@heec.ma",
            "password": "motdepasse",
        }
        values.update(overrides)
        return values

    def test_create_hashes_password_and_defaults_to_active(self) -> None:
        result = users.create_user(self.admin.id, self._payload())

        self.assertTrue(result.success, result.message)
        user = result.data
        self.assertEqual(user.email, "sara.tazi@heec.ma")
        self.assertTrue(user.active)
        self.assertNotEqual(user.password_hash, "motdepasse")
        self.assertTrue(user.check_password("motdepasse"))

    def test_email_is_unique_ignoring_case(self) -> None:
        users.create_user(self.admin.id, self._payload())
        duplicate = users.create_user(self.admin.id, self._payload(email="SARA.TAZI@heec.ma"))
        self.assertEqual(duplicate.error, ErrorKind.VALIDATION_ERROR)

    def test_invalid_email_and_short_password(self) -> None:
        result = users.create_user(self.admin.id, self._payload(email="sara", password="abc"))
        self.assertEqual(result.error, ErrorKind.VALIDATION_ERROR)
        self.assertIn("email", result.data["errors"])
        self.assertIn("password", result.data["errors"])

    def test_filiere_sets_department(self) -> None:
        department, filiere, _ = self.make_catalogue()
        result = users.create_user(self.admin.id, self._payload(filiere_id=filiere.id))
        self.assertTrue(result.success, result.message)
        self.assertEqual(result.data.department_id, department.id)

    def test_contradicting_department_is_rejected(self) -> None:
        _, filiere, _ = self.make_catalogue()
        other = self.make_department("Ingénierie")
        result = users.create_user(
            self.admin.id, self._payload(filiere_id=filiere.id, department_id=other.id)
        )
        self.assertEqual(result.error, ErrorKind.VALIDATION_ERROR)
        self.assertIsNone(User.query.filter_by(email="sara.tazi@heec.ma").first())

    def test_department_change_must_follow_the_filiere(self) -> None:
        department, filiere, _ = self.make_catalogue()
        other = self.make_department("Ingénierie")
        user = users.create_user(self.admin.id, self._payload(filiere_id=filiere.id)).data

        rejected = users.update_user(self.admin.id, user.id, {"department_id": other.id})
        self.assertEqual(rejected.error, ErrorKind.VALIDATION_ERROR)
        db.session.expire_all()
        kept = db.session.get(User, user.id)
        self.assertEqual(kept.department_id, department.id)
        self.assertEqual(kept.filiere_id, filiere.id)

        other_filiere = self.make_filiere(other, "Génie civil")
        moved = users.update_user(self.admin.id, user.id, {"filiere_id": other_filiere.id})
        self.assertTrue(moved.success, moved.message)
        self.assertEqual(moved.data.department_id, other.id)

    def test_password_hash_is_not_a_sort_key(self) -> None:
        users.create_user(self.admin.id, self._payload())
        result = users.get_users({"sort_by": "password_hash"})
        self.assertEqual(result.error, ErrorKind.VALIDATION_ERROR)
        self.assertTrue(users.get_users({"sort_by": "last_name"}).success)
    def test_update_rehashes_password_only_when_given(self) -> None:
        user = users.create_user(self.admin.id, self._payload()).data
        original_hash = user.password_hash

        renamed = users.update_user(self.admin.id, user.id, {"first_name": "Salma"})
        self.assertTrue(renamed.success, renamed.message)
        self.assertEqual(renamed.data.password_hash, original_hash)

        users.update_user(self.admin.id, user.id, {"password": "nouveau-secret"})
        self.assertTrue(db.session.get(User, user.id).check_password("nouveau-secret"))
        last = ActivityLog.query.order_by(ActivityLog.id.desc()).first()
        self.assertNotIn("password", last.details["fields"])

    def test_delete_removes_taught_seances(self) -> None:
        _, _, module = self.make_catalogue()
        teacher = self.make_teacher("teacher@heec.ma")
        self.make_seance(teacher, module, date(2025, 3, 10), time(9), time(10))

        result = users.delete_user(self.admin.id, teacher.id)

        self.assertTrue(result.success, result.message)
        self.assertEqual(module.seances, [])
        self.assertEqual(
            users.delete_user(self.admin.id, self.admin.id).error,
            ErrorKind.SELF_MODIFICATION_FORBIDDEN,
        )

    def test_role_membership(self) -> None:
        teacher = self.make_teacher("teacher@heec.ma")
        head = self.make_role(RoleType.CHEF_DE_FILIERE)

        self.assertTrue(users.assign_role(self.admin.id, teacher.id, head.id).success)
        self.assertEqual(
            users.assign_role(self.admin.id, teacher.id, head.id).error, ErrorKind.ALREADY_ASSIGNED
        )
        self.assertTrue(users.remove_role(self.admin.id, teacher.id, head.id).success)
        self.assertEqual(
            users.remove_role(self.admin.id, teacher.id, head.id).error, ErrorKind.NOT_ASSIGNED
        )


class RoleServiceTestCase(DatabaseTestCase):
    def test_create_and_filter_by_type(self) -> None:
        admin = self.make_admin()
        created = roles.create_role(admin.id, {"name": "Chef Finance", "type": "CHEF_DE_FILIERE"})
        self.assertTrue(created.success, created.message)
        self.assertEqual(created.data.type, RoleType.CHEF_DE_FILIERE)

        by_type = roles.get_roles_by_type("CHEF_DE_FILIERE")
        self.assertEqual([role.name for role in by_type.data], ["Chef Finance"])
        self.assertEqual(roles.get_roles_by_type("PRESIDENT").error, ErrorKind.VALIDATION_ERROR)

        invalid = roles.create_role(admin.id, {"name": "Inconnu", "type": "PRESIDENT"})
        self.assertEqual(invalid.error, ErrorKind.VALIDATION_ERROR)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
