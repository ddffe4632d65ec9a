"""Add application tables

Revision ID: 0001
Revises:
Create Date: 2025-01-01

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'professionals',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'employers',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('company_name', sa.String(length=200), nullable=False),
        sa.Column('contact_email', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'job_offers',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('employer_id', sa.String(length=64), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, default='Draft'),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('application_deadline', sa.DateTime(), nullable=True),
        sa.Column('application_count', sa.Integer(), nullable=False, default=0),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_job_offers_employer_id', 'job_offers', ['employer_id'], unique=False)
    op.create_index('ix_job_offers_status', 'job_offers', ['status'], unique=False)

    op.create_table(
        'applications',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('professional_id', sa.String(length=64), nullable=False),
        sa.Column('job_offer_id', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, default='Pending'),
        sa.Column('priority', sa.String(length=20), nullable=False, default='Medium'),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('motivation', sa.Text(), nullable=True),
        sa.Column('expected_salary_amount', sa.Float(), nullable=True),
        sa.Column('expected_salary_currency', sa.String(length=3), nullable=False, default='CRC'),
        sa.Column('expected_salary_negotiable', sa.Boolean(), nullable=False, default=True),
        sa.Column('availability_date', sa.DateTime(), nullable=True),
        sa.Column('additional_skills', sa.JSON(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('reviewed_by', sa.String(length=64), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, default=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint(
            'professional_id', 'job_offer_id', name='uq_applications_professional_offer'
        ),
    )
    op.create_index('ix_applications_professional_id', 'applications', ['professional_id'], unique=False)
    op.create_index('ix_applications_job_offer_id', 'applications', ['job_offer_id'], unique=False)
    op.create_index('ix_applications_status', 'applications', ['status'], unique=False)
    op.create_index('ix_applications_priority', 'applications', ['priority'], unique=False)
    op.create_index('ix_applications_applied_at', 'applications', ['applied_at'], unique=False)
    op.create_index('ix_applications_reviewed_at', 'applications', ['reviewed_at'], unique=False)
    op.create_index(
        'ix_applications_professional_applied', 'applications', ['professional_id', 'applied_at'], unique=False
    )
    op.create_index('ix_applications_offer_status', 'applications', ['job_offer_id', 'status'], unique=False)
    op.create_index(
        'ix_applications_professional_status', 'applications', ['professional_id', 'status'], unique=False
    )


def downgrade() -> None:
    op.drop_index('ix_applications_professional_status', table_name='applications')
    op.drop_index('ix_applications_offer_status', table_name='applications')
    op.drop_index('ix_applications_professional_applied', table_name='applications')
    op.drop_index('ix_applications_reviewed_at', table_name='applications')
    op.drop_index('ix_applications_applied_at', table_name='applications')
    op.drop_index('ix_applications_priority', table_name='applications')
    op.drop_index('ix_applications_status', table_name='applications')
    op.drop_index('ix_applications_job_offer_id', table_name='applications')
    op.drop_index('ix_applications_professional_id', table_name='applications')
    op.drop_table('applications')
    op.drop_index('ix_job_offers_status', table_name='job_offers')
    op.drop_index('ix_job_offers_employer_id', table_name='job_offers')
    op.drop_table('job_offers')
    op.drop_table('employers')
    op.drop_table('professionals')
