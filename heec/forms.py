"""Input validation for the service layer.

Payloads arrive as plain dictionaries (JSON bodies, CLI arguments, tests). They
are turned into form data so that the usual WTForms coercion and validators
apply. Update requests validate only the fields they carry.
"""
from __future__ import annotations

import enum
from datetime import date, datetime, time
from typing import Any, Mapping

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import (
    BooleanField,
    DateField,
    IntegerField,
    PasswordField,
    SelectField,
    StringField,
    TextAreaField,
    TimeField,
)
from wtforms.validators import DataRequired, Email, Length, NumberRange, Optional, ValidationError

from .labels import ROLE_LABELS, SEANCE_TYPE_LABELS
from .models import SeanceType
from .results import ActionResult, ErrorKind


TIME_FORMATS = ["%H:%M", "%H:%M:%S"]
FALSE_VALUES = (False, "false", "", "0", "off", "no")


def _coerce(field: Any, value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        value = value.value
    if isinstance(field, BooleanField):
        if isinstance(value, str):
            return value.strip().lower()
        return "y" if value else "false"
    if isinstance(field, TimeField):
        if isinstance(value, (datetime, time)):
            return value.strftime("%H:%M:%S")
        if isinstance(value, str) and "T" in value:
            return datetime.fromisoformat(value).strftime("%H:%M:%S")
    if isinstance(field, DateField):
        if isinstance(value, datetime):
            return value.date().isoformat()
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, str):
            return value[:10]
    return str(value)


class PayloadForm(FlaskForm):
    class Meta:
        csrf = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None, *, partial: bool = False) -> "PayloadForm":
        payload = payload or {}
        form = cls(formdata=MultiDict())
        formdata = MultiDict()
        for name, field in form._fields.items():
            if name not in payload:
                continue
            coerced = _coerce(field, payload[name])
            if coerced is not None:
                formdata.add(name, coerced)
        form.process(formdata)
        form.provided = {name for name in form._fields if name in payload}
        if partial:
            for name in list(form._fields):
                if name not in form.provided:
                    del form[name]
        return form

    def cleaned_data(self) -> dict[str, Any]:
        """Values of the fields present in the submitted payload."""
        cleaned: dict[str, Any] = {}
        for name in self.provided:
            if name not in self._fields:
                continue
            value = self._fields[name].data
            if isinstance(value, str):
                value = value.strip() or None
            cleaned[name] = value
        return cleaned


def validation_error(form: PayloadForm) -> ActionResult:
    details = []
    for name, errors in form.errors.items():
        label = form._fields[name].label.text if name in form._fields else name
        details.append(f"{label} : {' '.join(errors)}")
    return ActionResult.fail(
        ErrorKind.VALIDATION_ERROR,
        "Données invalides : " + " ; ".join(details),
        data={"errors": form.errors},
    )


class DepartmentForm(PayloadForm):
    name = StringField(
        "Nom",
        validators=[DataRequired("Le nom du département est requis"), Length(max=120)],
    )
    description = TextAreaField("Description", validators=[Optional()])


class FiliereForm(PayloadForm):
    name = StringField(
        "Nom",
        validators=[DataRequired("Le nom de la filière est requis"), Length(max=120)],
    )
    description = TextAreaField("Description", validators=[Optional()])
    department_id = IntegerField(
        "Département", validators=[DataRequired("Le département est requis")]
    )


class ModuleForm(PayloadForm):
    name = StringField(
        "Nom",
        validators=[DataRequired("Le nom du module est requis"), Length(max=120)],
    )
    code = StringField(
        "Code",
        validators=[DataRequired("Le code du module est requis"), Length(max=40)],
    )
    description = TextAreaField("Description", validators=[Optional()])
    credits = IntegerField(
        "Crédits",
        validators=[Optional(), NumberRange(min=1, message="Les crédits doivent être positifs")],
    )
    hours = IntegerField(
        "Heures",
        validators=[Optional(), NumberRange(min=1, message="Le volume horaire doit être positif")],
    )
    filiere_id = IntegerField("Filière", validators=[DataRequired("La filière est requise")])


class SeanceForm(PayloadForm):
    title = StringField(
        "Titre",
        validators=[DataRequired("Le titre de la séance est requis"), Length(max=255)],
    )
    content = TextAreaField("Contenu", validators=[Optional()])
    date = DateField("Date", validators=[DataRequired("La date de la séance est requise")])
    start_time = TimeField(
        "Début",
        format=TIME_FORMATS,
        validators=[DataRequired("L'heure de début est requise")],
    )
    end_time = TimeField(
        "Fin",
        format=TIME_FORMATS,
        validators=[DataRequired("L'heure de fin est requise")],
    )
    room = StringField("Salle", validators=[Optional(), Length(max=120)])
    type = SelectField(
        "Type",
        choices=[(member.value, label) for member, label in SEANCE_TYPE_LABELS.items()],
        default=SeanceType.COURS.value,
        validators=[Optional()],
    )
    supplement = TextAreaField("Complément", validators=[Optional()])
    module_id = IntegerField("Module", validators=[DataRequired("Le module est requis")])
    teacher_id = IntegerField("Enseignant", validators=[DataRequired("L'enseignant est requis")])

    def validate_end_time(self, field: TimeField) -> None:
        if self.start_time is None or self.start_time.data is None or field.data is None:
            return
        if field.data <= self.start_time.data:
            raise ValidationError("L'heure de fin doit être après l'heure de début")


class UserForm(PayloadForm):
    last_name = StringField(
        "Nom", validators=[DataRequired("Le nom est requis"), Length(max=120)]
    )
    first_name = StringField(
        "Prénom", validators=[DataRequired("Le prénom est requis"), Length(max=120)]
    )
    email = StringField(
        "Email",
        validators=[DataRequired("L'email est requis"), Email("Email invalide"), Length(max=255)],
    )
    password = PasswordField(
        "Mot de passe",
        validators=[
            DataRequired("Le mot de passe est requis"),
            Length(min=6, message="Le mot de passe doit contenir au moins 6 caractères"),
        ],
    )
    active = BooleanField("Actif", false_values=FALSE_VALUES)
    department_id = IntegerField("Département", validators=[Optional()])
    filiere_id = IntegerField("Filière", validators=[Optional()])


class RoleForm(PayloadForm):
    name = StringField(
        "Nom", validators=[DataRequired("Le nom du rôle est requis"), Length(max=120)]
    )
    type = SelectField(
        "Type",
        choices=[(member.value, label) for member, label in ROLE_LABELS.items()],
        validators=[DataRequired("Le type de rôle est requis")],
    )
    description = TextAreaField("Description", validators=[Optional()])


class PaginationForm(PayloadForm):
    page = IntegerField("Page", validators=[Optional(), NumberRange(min=1)])
    limit = IntegerField("Limite", validators=[Optional(), NumberRange(min=1, max=100)])
    search = StringField("Recherche", validators=[Optional(), Length(max=120)])
    sort_by = StringField("Tri", validators=[Optional(), Length(max=40)])
    sort_order = SelectField(
        "Ordre",
        choices=[("asc", "Croissant"), ("desc", "Décroissant")],
        default="asc",
        validators=[Optional()],
    )

