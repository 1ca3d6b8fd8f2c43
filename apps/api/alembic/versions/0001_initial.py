"""Initial schema: forms, contacts, employment records, submissions.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18

Creates:
- forms (field list stored as JSONB)
- contacts (unique external id)
- employment_records
- form_submissions
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

JSON = sa.JSON().with_variant(postgresql.JSONB(astext_type=sa.Text()), 'postgresql')


def upgrade() -> None:
    # ==========================================================================
    # forms
    # ==========================================================================
    op.create_table(
        'forms',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), server_default=sa.text("'draft'"), nullable=False),
        sa.Column('form_type', sa.String(20), server_default=sa.text("'standard'"), nullable=False),
        sa.Column('fields', JSON, nullable=False),
        sa.Column('created_by', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_forms_status', 'forms', ['status'])

    # ==========================================================================
    # contacts
    # ==========================================================================
    op.create_table(
        'contacts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('external_id', sa.String(64), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('graduation_year', sa.Integer(), nullable=True),
        sa.Column('degree', sa.String(100), nullable=True),
        sa.Column('major', sa.String(100), nullable=True),
        sa.Column('linked_in', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('do_not_contact', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('last_contact_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('external_id', name='uq_contacts_external_id'),
    )
    op.create_index('idx_contacts_email', 'contacts', ['email'])

    # ==========================================================================
    # employment_records
    # ==========================================================================
    op.create_table(
        'employment_records',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('contact_id', sa.Uuid(), nullable=False),
        sa.Column('job_title', sa.String(200), nullable=True),
        sa.Column('organization', sa.String(200), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_current', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['contact_id'], ['contacts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_employment_records_contact', 'employment_records', ['contact_id'])

    # ==========================================================================
    # form_submissions
    # ==========================================================================
    op.create_table(
        'form_submissions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('form_id', sa.Uuid(), nullable=True),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('status', sa.String(20), server_default=sa.text("'pending'"), nullable=False),
        sa.Column('content', JSON, nullable=False),
        sa.Column('mapped_fields', JSON, nullable=False),
        sa.Column('submitter_kind', sa.String(20), nullable=False),
        sa.Column('submitter_name', sa.String(255), nullable=False),
        sa.Column('submitter_email', sa.String(255), nullable=True),
        sa.Column('external_id', sa.String(64), nullable=True),
        sa.Column('contact_id', sa.Uuid(), nullable=True),
        sa.Column('notes', sa.Text(), server_default=sa.text("''"), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['form_id'], ['forms.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['contact_id'], ['contacts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_form_submissions_form', 'form_submissions', ['form_id'])
    op.create_index('idx_form_submissions_status', 'form_submissions', ['status'])
    op.create_index('idx_form_submissions_contact', 'form_submissions', ['contact_id'])


def downgrade() -> None:
    op.drop_table('form_submissions')
    op.drop_table('employment_records')
    op.drop_table('contacts')
    op.drop_table('forms')
