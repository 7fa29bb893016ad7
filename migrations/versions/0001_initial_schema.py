"""Initial HEEC schema"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


ROLE_TYPES = ("ENSEIGNANT", "ADMINISTRATEUR", "CHEF_DE_FILIERE", "CHEF_DE_DEPARTEMENT", "DIRECTEUR_GENERAL")
SEANCE_TYPES = ("COURS", "TD", "TP", "EXAMEN", "CONFERENCE", "SEMINAIRE")
ACTION_TYPES = (
    "CREATE",
    "UPDATE",
    "DELETE",
    "LOGIN",
    "LOGOUT",
    "ASSIGN",
    "UNASSIGN",
    "ACTIVATE",
    "DEACTIVATE",
)
ENTITY_TYPES = ("USER", "ROLE", "DEPARTEMENT", "FILIERE", "MODULE", "SEANCE")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime()),
        sa.Column("updated_at", sa.DateTime()),
    ]


def upgrade() -> None:
    op.create_table(
        "department",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False, unique=True),
        sa.Column("description", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "filiere",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column(
            "department_id",
            sa.Integer(),
            sa.ForeignKey("department.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        *_timestamps(),
    )
    op.create_index("ix_filiere_department_id", "filiere", ["department_id"])

    op.create_table(
        "module",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("code", sa.String(length=40), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("credits", sa.Integer()),
        sa.Column("hours", sa.Integer()),
        sa.Column(
            "filiere_id",
            sa.Integer(),
            sa.ForeignKey("filiere.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        *_timestamps(),
        sa.CheckConstraint("credits IS NULL OR credits > 0", name="chk_module_credits"),
        sa.CheckConstraint("hours IS NULL OR hours > 0", name="chk_module_hours"),
    )
    op.create_index("ix_module_filiere_id", "module", ["filiere_id"])

    op.create_table(
        "role",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("type", sa.Enum(*ROLE_TYPES, name="role_type"), nullable=False),
        sa.Column("description", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("department.id", ondelete="SET NULL")),
        sa.Column("filiere_id", sa.Integer(), sa.ForeignKey("filiere.id", ondelete="SET NULL")),
        *_timestamps(),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)
    op.create_index("ix_user_department_id", "user", ["department_id"])
    op.create_index("ix_user_filiere_id", "user", ["filiere_id"])

    op.create_table(
        "user_role",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", sa.Integer(), sa.ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "user_module",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("module_id", sa.Integer(), sa.ForeignKey("module.id", ondelete="CASCADE"), primary_key=True),
    )

    op.create_table(
        "seance",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text()),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.DateTime(), nullable=False),
        sa.Column("end_time", sa.DateTime(), nullable=False),
        sa.Column("room", sa.String(length=120)),
        sa.Column("type", sa.Enum(*SEANCE_TYPES, name="seance_type"), nullable=False),
        sa.Column("supplement", sa.Text()),
        sa.Column("module_id", sa.Integer(), sa.ForeignKey("module.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("teacher_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("end_time > start_time", name="chk_seance_time_order"),
    )
    op.create_index("ix_seance_date", "seance", ["date"])
    op.create_index("ix_seance_module_id", "seance", ["module_id"])
    op.create_index("ix_seance_teacher_id", "seance", ["teacher_id"])

    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id", ondelete="SET NULL")),
        sa.Column("action", sa.Enum(*ACTION_TYPES, name="action_type"), nullable=False),
        sa.Column("entity_type", sa.Enum(*ENTITY_TYPES, name="entity_type"), nullable=False),
        sa.Column("entity_id", sa.Integer()),
        sa.Column("entity_name", sa.String(length=255)),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("metadata", sa.JSON()),
        sa.Column("ip_address", sa.String(length=64)),
        sa.Column("user_agent", sa.String(length=255)),
        sa.Column("created_at", sa.DateTime()),
    )
    op.create_index("ix_activity_log_user_id", "activity_log", ["user_id"])
    op.create_index("ix_activity_log_created_at", "activity_log", ["created_at"])


def downgrade() -> None:
    op.drop_table("activity_log")
    op.drop_table("seance")
    op.drop_table("user_module")
    op.drop_table("user_role")
    op.drop_table("user")
    op.drop_table("role")
    op.drop_table("module")
    op.drop_table("filiere")
    op.drop_table("department")
