"""Initial schema: locations, users, schedules, templates, shifts, availability, time off, trades, labor entries"""

from alembic import op
import sqlalchemy as sa

# Revision identifiers, used by Alembic.
revision = "20240101_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "locations",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("code", sa.String(), nullable=True, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("role", sa.String(), nullable=False),
        sa.Column("location_id", sa.String(), sa.ForeignKey("locations.id"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=True),
    )
    op.create_index("ix_users_location_id", "users", ["location_id"])

    # --- schedules ---
    op.create_table(
        "schedules",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("location_id", sa.String(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("schedule_date", sa.Date(), nullable=False),
        sa.Column("week_start", sa.Date(), nullable=False),
        sa.Column("week_end", sa.Date(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("published_by", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint("location_id", "schedule_date", name="uq_schedules_location_date"),
    )
    op.create_index("ix_schedules_location_id", "schedules", ["location_id"])

    op.create_table(
        "schedule_templates",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("location_id", sa.String(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("day_of_week", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        sa.Column("created_by", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint(
            "day_of_week IS NULL OR (day_of_week >= 0 AND day_of_week <= 6)",
            name="ck_schedule_templates_dow",
        ),
    )
    op.create_index("ix_schedule_templates_location_id", "schedule_templates", ["location_id"])

    op.create_table(
        "template_shifts",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "template_id", sa.String(),
            sa.ForeignKey("schedule_templates.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("position", sa.String(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("required_count", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("notes", sa.Text(), nullable=True),
    )
    op.create_index("ix_template_shifts_template_id", "template_shifts", ["template_id"])

    # --- shifts ---
    op.create_table(
        "shifts",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("schedule_id", sa.String(), sa.ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False),
        sa.Column("location_id", sa.String(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("position", sa.String(), nullable=False),
        sa.Column("shift_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("break_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("total_hours", sa.Numeric(5, 2), nullable=True),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=True),
        sa.Column("estimated_cost", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("requires_coverage", sa.Boolean(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("clock_in_at", sa.DateTime(), nullable=True),
        sa.Column("clock_out_at", sa.DateTime(), nullable=True),
        sa.Column("actual_hours", sa.Numeric(5, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint("start_time < end_time", name="ck_shifts_time_range"),
        sa.CheckConstraint("break_minutes >= 0", name="ck_shifts_break_nonneg"),
        sa.CheckConstraint("total_hours IS NULL OR total_hours >= 0", name="ck_shifts_hours_nonneg"),
    )
    op.create_index("ix_shifts_schedule_id", "shifts", ["schedule_id"])
    op.create_index("ix_shifts_location_id", "shifts", ["location_id"])
    op.create_index("ix_shifts_user_id", "shifts", ["user_id"])
    op.create_index("ix_shifts_shift_date", "shifts", ["shift_date"])
    op.create_index("ix_shifts_user_date", "shifts", ["user_id", "shift_date"])

    # --- availability / time off ---
    op.create_table(
        "employee_availability",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("location_id", sa.String(), sa.ForeignKey("locations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("is_preferred", sa.Boolean(), nullable=True),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_availability_dow"),
        sa.CheckConstraint("start_time < end_time", name="ck_availability_time_range"),
    )
    op.create_index("ix_employee_availability_user_id", "employee_availability", ["user_id"])
    op.create_index("ix_employee_availability_location_id", "employee_availability", ["location_id"])
    op.create_index("ix_employee_availability_day_of_week", "employee_availability", ["day_of_week"])

    op.create_table(
        "time_off_requests",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("location_id", sa.String(), sa.ForeignKey("locations.id", ondelete="CASCADE"), nullable=False),
        sa.Column("request_type", sa.String(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("total_days", sa.Integer(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("requested_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("reviewed_by", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("review_notes", sa.Text(), nullable=True),
        sa.CheckConstraint("start_date <= end_date", name="ck_time_off_dates"),
    )
    op.create_index("ix_time_off_requests_user_id", "time_off_requests", ["user_id"])
    op.create_index("ix_time_off_requests_location_id", "time_off_requests", ["location_id"])
    op.create_index("ix_time_off_requests_status", "time_off_requests", ["status"])

    # --- trades ---
    op.create_table(
        "shift_trades",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("shift_id", sa.String(), sa.ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("from_user_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("to_user_id", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("trade_type", sa.String(), nullable=False),
        sa.Column("offered_shift_id", sa.String(), sa.ForeignKey("shifts.id"), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("manager_approval_required", sa.Boolean(), nullable=True),
        sa.Column("approved_by", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index("ix_shift_trades_shift_id", "shift_trades", ["shift_id"])
    op.create_index("ix_shift_trades_from_user_id", "shift_trades", ["from_user_id"])
    op.create_index("ix_shift_trades_to_user_id", "shift_trades", ["to_user_id"])
    op.create_index("ix_shift_trades_status", "shift_trades", ["status"])

    # --- labor entries ---
    op.create_table(
        "labor_entries",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("location_id", sa.String(), sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("user_id", sa.String(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("position", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        # naive local wall clock, same as start/end
        sa.Column("clock_in_time", sa.DateTime(timezone=False), nullable=True),
        sa.Column("clock_out_time", sa.DateTime(timezone=False), nullable=True),
        sa.Column("clock_in_location", sa.String(), nullable=True),
        sa.Column("break_minutes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("scheduled_hours", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("actual_hours", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("hourly_rate", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("labor_cost", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("approved_by", sa.String(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("actual_sales", sa.Float(), nullable=True),
        sa.Column("projected_sales", sa.Float(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
        sa.CheckConstraint("break_minutes >= 0", name="ck_labor_entries_break_nonneg"),
        sa.CheckConstraint("labor_cost >= 0", name="ck_labor_entries_cost_nonneg"),
    )
    op.create_index("ix_labor_entries_location_id", "labor_entries", ["location_id"])
    op.create_index("ix_labor_entries_user_id", "labor_entries", ["user_id"])
    op.create_index("ix_labor_entries_date", "labor_entries", ["date"])
    op.create_index("ix_labor_entries_location_date", "labor_entries", ["location_id", "date"])


def downgrade():
    op.drop_table("labor_entries")
    op.drop_table("shift_trades")
    op.drop_table("time_off_requests")
    op.drop_table("employee_availability")
    op.drop_table("shifts")
    op.drop_table("template_shifts")
    op.drop_table("schedule_templates")
    op.drop_table("schedules")
    op.drop_table("users")
    op.drop_table("locations")
