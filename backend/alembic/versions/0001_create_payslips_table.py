"""create payslips table

Revision ID: 0001
Revises: None
Create Date: 2024-01-10
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "payslips",
        sa.Column("payslip_id", sa.String(length=32), nullable=False),
        sa.Column("employee_id", sa.String(length=7), nullable=False),
        sa.Column("employee_name", sa.Text(), nullable=False),
        sa.Column("employee_email", sa.Text(), nullable=False),
        sa.Column("month_year", sa.String(length=20), nullable=False),
        sa.Column("designation", sa.Text(), nullable=False),
        sa.Column("office_location", sa.Text(), nullable=False),
        sa.Column("employment_type", sa.Text(), nullable=False),
        sa.Column("date_of_joining", sa.Date(), nullable=False),
        sa.Column("working_days", sa.Integer(), nullable=False),
        sa.Column("bank_name", sa.Text(), nullable=False),
        sa.Column("pan_no", sa.String(length=10), nullable=False),
        sa.Column("bank_account_no", sa.String(length=18), nullable=False),
        sa.Column("pf_no", sa.String(length=22), nullable=False),
        sa.Column("uan_no", sa.String(length=12), nullable=False),
        sa.Column("esic_no", sa.String(length=17), nullable=False),
        sa.Column("basic_salary", sa.Numeric(10, 2), nullable=False),
        sa.Column("hra", sa.Numeric(10, 2), nullable=False),
        sa.Column("other_allowance", sa.Numeric(10, 2), nullable=False),
        sa.Column("professional_tax", sa.Numeric(10, 2), nullable=False),
        sa.Column("tds", sa.Numeric(10, 2), nullable=False),
        sa.Column("provident_fund", sa.Numeric(10, 2), nullable=False),
        sa.Column("lwp", sa.Numeric(10, 2), nullable=False),
        sa.Column("other_deduction", sa.Numeric(10, 2), nullable=False),
        sa.Column("net_salary", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("payslip_id"),
        sa.UniqueConstraint("employee_id", "month_year", name="unique_employee_month_year"),
    )
    op.create_index(op.f("ix_payslips_employee_id"), "payslips", ["employee_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_payslips_employee_id"), table_name="payslips")
    op.drop_table("payslips")
