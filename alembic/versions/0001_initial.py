"""initial schema: users, civic reports, votes, facilities, worker locations

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum("CITIZEN", "WORKER", "ADMIN", name="userrole")
report_type = sa.Enum(
    "ILLEGAL_DUMPING",
    "OPEN_TOILET",
    "DIRTY_TOILET",
    "OVERFLOW_DUSTBIN",
    "DEAD_ANIMAL",
    "FOUL_SMELL",
    "PUBLIC_BIN_REQUEST",
    "PUBLIC_TOILET_REQUEST",
    name="reporttype",
)
report_status = sa.Enum("PENDING", "ESCALATED", "RESOLVED", name="reportstatus")
vote_direction = sa.Enum("SUPPORT", "OPPOSE", name="votedirection")
facility_type = sa.Enum(
    "PUBLIC_TOILET", "PUBLIC_BIN", "COLLECTION_POINT", "RECYCLING_CENTER", name="facilitytype"
)


def timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("hashed_password", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("role", user_role, nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        *timestamps(),
    )
    op.create_index("ix_user_id", "user", ["id"])
    op.create_index("ix_user_email", "user", ["email"], unique=True)

    op.create_table(
        "civicreport",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", report_type, nullable=False),
        sa.Column("image_url", sa.String(length=255), nullable=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("support_count", sa.Integer(), nullable=False),
        sa.Column("opposition_count", sa.Integer(), nullable=False),
        sa.Column("status", report_status, nullable=False),
        sa.Column(
            "created_by_id",
            sa.Integer(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *timestamps(),
        sa.CheckConstraint("support_count >= 0", name="ck_civicreport_support_count"),
        sa.CheckConstraint("opposition_count >= 0", name="ck_civicreport_opposition_count"),
    )
    op.create_index("ix_civicreport_id", "civicreport", ["id"])
    op.create_index("ix_civicreport_status", "civicreport", ["status"])
    op.create_index("ix_civicreport_created_by_id", "civicreport", ["created_by_id"])

    op.create_table(
        "vote",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("direction", vote_direction, nullable=False),
        sa.Column(
            "report_id",
            sa.Integer(),
            sa.ForeignKey("civicreport.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
        ),
        *timestamps(),
        sa.UniqueConstraint("report_id", "user_id", name="uq_vote_report_user"),
    )
    op.create_index("ix_vote_id", "vote", ["id"])
    op.create_index("ix_vote_report_id", "vote", ["report_id"])
    op.create_index("ix_vote_user_id", "vote", ["user_id"])

    op.create_table(
        "publicfacility",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("type", facility_type, nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        *timestamps(),
    )
    op.create_index("ix_publicfacility_id", "publicfacility", ["id"])

    op.create_table(
        "workerlocation",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column(
            "worker_id",
            sa.Integer(),
            sa.ForeignKey("user.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        *timestamps(),
    )
    op.create_index("ix_workerlocation_id", "workerlocation", ["id"])


def downgrade() -> None:
    op.drop_table("workerlocation")
    op.drop_table("publicfacility")
    op.drop_table("vote")
    op.drop_table("civicreport")
    op.drop_table("user")
    for enum_type in (facility_type, vote_direction, report_status, report_type, user_role):
        enum_type.drop(op.get_bind(), checkfirst=True)
