from __future__ import annotations

import unittest
from datetime import date, datetime, time
from typing import Optional

from heec import create_app, db
from heec.config import TestConfig
from heec.models import Department, Filiere, Module, Role, RoleType, Seance, SeanceType, User


class DatabaseTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app = create_app(TestConfig)
        self.app_context = self.app.app_context()
        self.app_context.push()
        db.create_all()

    def tearDown(self) -> None:
        db.session.remove()
        db.drop_all()
        self.app_context.pop()

    def make_role(self, role_type: RoleType, name: Optional[str] = None) -> Role:
        role = Role.query.filter_by(type=role_type).first()
        if role is None:
            role = Role(name=name or role_type.value.title(), type=role_type)
            db.session.add(role)
            db.session.commit()
        return role

    def make_user(
        self,
        email: str,
        *role_types: RoleType,
        first_name: str = "Prénom",
        last_name: str = "Nom",
        active: bool = True,
    ) -> User:
        user = User(first_name=first_name, last_name=last_name, email=email, active=active)
        user.set_password("secret-password")
        for role_type in role_types:
            user.roles.append(self.make_role(role_type))
        db.session.add(user)
        db.session.commit()
        return user

    def make_admin(self, email: str = "admin@heec.ma") -> User:
        return self.make_user(email, RoleType.ADMINISTRATEUR, first_name="Ada", last_name="Admin")

    def make_teacher(self, email: str, last_name: str = "Enseignant", first_name: str = "Eva") -> User:
        return self.make_user(email, RoleType.ENSEIGNANT, first_name=first_name, last_name=last_name)

    def make_department(self, name: str = "Gestion") -> Department:
        department = Department(name=name)
        db.session.add(department)
        db.session.commit()
        return department

    def make_filiere(self, department: Department, name: str = "Finance") -> Filiere:
        filiere = Filiere(name=name, department=department)
        db.session.add(filiere)
        db.session.commit()
        return filiere

    def make_module(self, filiere: Filiere, code: str = "FIN101", name: str = "Comptabilité") -> Module:
        module = Module(code=code, name=name, filiere=filiere, hours=30, credits=3)
        db.session.add(module)
        db.session.commit()
        return module

    def make_seance(
        self,
        teacher: User,
        module: Module,
        day: date,
        start: time,
        end: time,
        seance_type: SeanceType = SeanceType.COURS,
    ) -> Seance:
        seance = Seance(
            title=f"{module.code} {start:%H:%M}",
            date=day,
            start_time=datetime.combine(day, start),
            end_time=datetime.combine(day, end),
            type=seance_type,
            module=module,
            teacher=teacher,
        )
        db.session.add(seance)
        db.session.commit()
        return seance

    def make_catalogue(self) -> tuple[Department, Filiere, Module]:
        department = self.make_department()
        filiere = self.make_filiere(department)
        module = self.make_module(filiere)
        return department, filiere, module
