from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_schema"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def _enums() -> dict[str, sa.Enum]:
    return {
        "userrole": sa.Enum("COMPANY", "INFLUENCER", "ADMIN", name="userrole"),
        "userstatus": sa.Enum(
            "PROVISIONAL",
            "VERIFICATION_PENDING",
            "VERIFIED",
            "SUSPENDED",
            name="userstatus",
        ),
        "companystatus": sa.Enum(
            "PROVISIONAL", "VERIFICATION_PENDING", "VERIFIED", name="companystatus"
        ),
        "verificationtype": sa.Enum("EMAIL", "BUSINESS", name="verificationtype"),
        "verificationrecordstatus": sa.Enum(
            "PENDING", "APPROVED", name="verificationrecordstatus"
        ),
        "documenttype": sa.Enum(
            "BUSINESS_REGISTRATION",
            "ID_DOCUMENT",
            "INVOICE_DOCUMENT",
            name="documenttype",
        ),
        "documentstatus": sa.Enum(
            "PENDING",
            "APPROVED",
            "REJECTED",
            "RESUBMIT_REQUIRED",
            name="documentstatus",
        ),
        "projectstatus": sa.Enum(
            "PENDING",
            "MATCHED",
            "IN_PROGRESS",
            "COMPLETED",
            "CANCELLED",
            name="projectstatus",
        ),
        "scoutstatus": sa.Enum("PENDING", "ACCEPTED", "REJECTED", name="scoutstatus"),
        "invoicestatus": sa.Enum("PENDING", "PAID", "OVERDUE", name="invoicestatus"),
        "notificationtype": sa.Enum(
            "SCOUT_RECEIVED",
            "SCOUT_ACCEPTED",
            "SCOUT_REJECTED",
            "APPLICATION_RECEIVED",
            "APPLICATION_ACCEPTED",
            "PROJECT_MATCHED",
            "INVOICE_CREATED",
            "PAYMENT_COMPLETED",
            "VERIFICATION_APPROVED",
            "VERIFICATION_REJECTED",
            "MESSAGE_RECEIVED",
            "SYSTEM",
            name="notificationtype",
        ),
        "platform": sa.Enum("TIKTOK", "YOUTUBE", "TWITTER", name="platform"),
    }


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.func.now(),
    )


def upgrade() -> None:
    enums = _enums()

    bind = op.get_bind()
    for enum in enums.values():
        enum.create(bind, checkfirst=True)

    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", enums["userrole"], nullable=False),
        sa.Column("password_hash", sa.String(), nullable=True),
        sa.Column(
            "status",
            enums["userstatus"],
            nullable=False,
            server_default="PROVISIONAL",
        ),
        sa.Column("email_verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "companies",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, unique=True
        ),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("legal_number", sa.String(length=50), nullable=True),
        sa.Column("representative_name", sa.String(length=100), nullable=True),
        sa.Column("industry", sa.String(length=100), nullable=True),
        sa.Column(
            "is_verified",
            sa.Boolean(),
            nullable=False,
            server_default=sa.false(),
        ),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "status",
            enums["companystatus"],
            nullable=False,
            server_default="PROVISIONAL",
        ),
        _created_at(),
    )

    op.create_table(
        "influencers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False, unique=True
        ),
        sa.Column("display_name", sa.String(length=50), nullable=False),
        sa.Column("bio", sa.String(), nullable=True),
        sa.Column("prefecture", sa.String(length=50), nullable=True),
        _created_at(),
    )

    op.create_table(
        "email_verification_tokens",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("token_hash", sa.String(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_email_verification_tokens_user_id",
        "email_verification_tokens",
        ["user_id"],
    )
    op.create_index(
        "ix_email_verification_tokens_token_hash",
        "email_verification_tokens",
        ["token_hash"],
        unique=True,
    )

    op.create_table(
        "verification_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", enums["verificationtype"], nullable=False),
        sa.Column("status", enums["verificationrecordstatus"], nullable=False),
        sa.Column("verified_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("user_id", "type", name="uq_verification_records_user_type"),
    )
    op.create_index(
        "ix_verification_records_user_id", "verification_records", ["user_id"]
    )

    op.create_table(
        "verification_documents",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("document_type", enums["documenttype"], nullable=False),
        sa.Column("document_url", sa.String(length=1024), nullable=False),
        sa.Column(
            "company_id",
            sa.Integer(),
            sa.ForeignKey("companies.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "influencer_id",
            sa.Integer(),
            sa.ForeignKey("influencers.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("file_name", sa.String(length=255), nullable=True),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column(
            "status",
            enums["documentstatus"],
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        _created_at("uploaded_at"),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "(company_id IS NULL) <> (influencer_id IS NULL)",
            name="ck_verification_documents_single_owner",
        ),
    )
    op.create_index(
        "ix_verification_documents_company_id",
        "verification_documents",
        ["company_id"],
    )
    op.create_index(
        "ix_verification_documents_influencer_id",
        "verification_documents",
        ["influencer_id"],
    )

    op.create_table(
        "onboarding_progress",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            unique=True,
        ),
        sa.Column("role", enums["userrole"], nullable=False),
        sa.Column("completed_steps", sa.JSON(), nullable=False),
        sa.Column("skipped", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("skipped_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _created_at("updated_at"),
    )

    op.create_table(
        "projects",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"), nullable=False
        ),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("budget", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column(
            "status",
            enums["projectstatus"],
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column(
            "matched_influencer_id",
            sa.Integer(),
            sa.ForeignKey("influencers.id"),
            nullable=True,
        ),
        _created_at(),
    )
    op.create_index("ix_projects_company_id", "projects", ["company_id"])

    for table in ("applications", "scouts"):
        columns = [
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column(
                "project_id",
                sa.Integer(),
                sa.ForeignKey("projects.id", ondelete="CASCADE"),
                nullable=False,
            ),
            sa.Column(
                "influencer_id",
                sa.Integer(),
                sa.ForeignKey("influencers.id"),
                nullable=False,
            ),
            sa.Column(
                "company_id", sa.Integer(), sa.ForeignKey("companies.id"), nullable=False
            ),
            sa.Column("message", sa.String(), nullable=True),
        ]
        if table == "applications":
            columns += [
                sa.Column("proposed_price", sa.Integer(), nullable=True),
                sa.Column(
                    "is_accepted",
                    sa.Boolean(),
                    nullable=False,
                    server_default=sa.false(),
                ),
                _created_at("applied_at"),
            ]
        else:
            columns += [
                sa.Column(
                    "status",
                    enums["scoutstatus"],
                    nullable=False,
                    server_default="PENDING",
                ),
                sa.Column("rejection_reason", sa.String(), nullable=True),
                sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
                _created_at(),
            ]
        op.create_table(
            table,
            *columns,
            sa.UniqueConstraint(
                "project_id",
                "influencer_id",
                name=f"uq_{table}_project_influencer",
            ),
        )
        for column in ("project_id", "influencer_id", "company_id"):
            op.create_index(f"ix_{table}_{column}", table, [column])

    op.create_table(
        "invoices",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_number", sa.String(length=32), nullable=False),
        sa.Column(
            "project_id", sa.Integer(), sa.ForeignKey("projects.id"), nullable=False
        ),
        sa.Column(
            "company_id", sa.Integer(), sa.ForeignKey("companies.id"), nullable=False
        ),
        sa.Column(
            "influencer_id",
            sa.Integer(),
            sa.ForeignKey("influencers.id"),
            nullable=False,
        ),
        sa.Column("amount", sa.Integer(), nullable=False),
        sa.Column("tax", sa.Integer(), nullable=False),
        sa.Column("total_amount", sa.Integer(), nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "status",
            enums["invoicestatus"],
            nullable=False,
            server_default="PENDING",
        ),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_invoices_invoice_number", "invoices", ["invoice_number"], unique=True
    )
    for column in ("project_id", "company_id", "influencer_id"):
        op.create_index(f"ix_invoices_{column}", "invoices", [column])

    op.create_table(
        "notifications",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "user_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", enums["notificationtype"], nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("message", sa.String(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index("ix_notifications_user_id", "notifications", ["user_id"])

    op.create_table(
        "messages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "project_id",
            sa.Integer(),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "sender_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "receiver_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("content", sa.String(), nullable=False),
        sa.Column("is_read", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index("ix_messages_project_id", "messages", ["project_id"])
    op.create_index(
        "ix_messages_receiver_unread", "messages", ["receiver_id", "is_read"]
    )

    op.create_table(
        "social_accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "influencer_id",
            sa.Integer(),
            sa.ForeignKey("influencers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("platform", enums["platform"], nullable=False),
        sa.Column("username", sa.String(length=100), nullable=False),
        sa.Column("follower_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("engagement_rate", sa.Float(), nullable=False, server_default="0"),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "influencer_id", "platform", name="uq_social_accounts_influencer_platform"
        ),
    )
    op.create_index(
        "ix_social_accounts_influencer_id", "social_accounts", ["influencer_id"]
    )


def downgrade() -> None:
    op.drop_table("social_accounts")
    op.drop_table("messages")
    op.drop_table("notifications")
    op.drop_table("invoices")
    op.drop_table("scouts")
    op.drop_table("applications")
    op.drop_table("projects")
    op.drop_table("onboarding_progress")
    op.drop_table("verification_documents")
    op.drop_table("verification_records")
    op.drop_table("email_verification_tokens")
    op.drop_table("influencers")
    op.drop_table("companies")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    bind = op.get_bind()
    for enum in reversed(list(_enums().values())):
        enum.drop(bind, checkfirst=True)
