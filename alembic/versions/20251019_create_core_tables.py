"""create_core_tables

Revision ID: 20251019_create_core_tables
Revises:
Create Date: 2025-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20251019_create_core_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    user_role_enum = sa.Enum('admin', 'moderator', 'member', name='userrole')

    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('full_name', sa.String(150), nullable=False),
        sa.Column('email', sa.String(150), nullable=False, unique=True, index=True),
        sa.Column('phone', sa.String(20), nullable=False, unique=True, index=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('role', user_role_enum, nullable=False),
        sa.Column('is_verified', sa.Boolean, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('photo_url', sa.String(500)),
        sa.Column('dob', sa.Date),
        sa.Column('gender', sa.String(20)),
        sa.Column('village', sa.String(100)),
        sa.Column('mandal', sa.String(100)),
        sa.Column('district', sa.String(100)),
        sa.Column('pincode', sa.String(10)),
        sa.Column('caste', sa.String(100)),
        sa.Column('subcaste', sa.String(100)),
        sa.Column('marital_status', sa.String(20)),
        sa.Column('native_place', sa.String(100)),
    )
    op.create_table(
        'family_members',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(150), nullable=False),
        sa.Column('relation', sa.String(50), nullable=False),
        sa.Column('education', sa.String(150)),
        sa.Column('profession', sa.String(150)),
        sa.UniqueConstraint('user_id', 'name', 'relation', name='uq_family_member_user_name_relation'),
    )
    op.create_table(
        'education_details',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('degree', sa.String(150), nullable=False),
        sa.Column('institution', sa.String(200), nullable=False),
        sa.Column('year_of_passing', sa.Integer, nullable=False),
        sa.Column('grade', sa.String(20)),
        sa.UniqueConstraint('user_id', 'degree', 'institution', 'year_of_passing',
                            name='uq_education_user_degree_institution_year'),
    )
    op.create_table(
        'employment_details',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('company_name', sa.String(200), nullable=False),
        sa.Column('role', sa.String(150), nullable=False),
        sa.Column('years_of_experience', sa.Float),
        sa.Column('currently_working', sa.Boolean),
        sa.UniqueConstraint('user_id', 'company_name', 'role', name='uq_employment_user_company_role'),
    )
    op.create_table(
        'skills',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('skill_name', sa.String(100), nullable=False),
        sa.Column('endorsed_by', sa.Integer, sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.UniqueConstraint('user_id', 'skill_name', name='uq_skill_user_name'),
    )
    op.create_table(
        'jobs',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('posted_by', sa.Integer, sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('description', sa.Text),
        sa.Column('skills_required', sa.Text),
        sa.Column('job_type', sa.String(50), nullable=False),
        sa.Column('salary_range', sa.String(100)),
        sa.Column('location', sa.String(200)),
        sa.Column('map_lat', sa.Float),
        sa.Column('map_lng', sa.Float),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'job_applications',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('job_id', sa.Integer, sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('applied_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('job_id', 'user_id', name='uq_job_application_job_user'),
    )
    op.create_table(
        'payments',
        sa.Column('id', sa.Integer, primary_key=True, index=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=False),
        sa.Column('payment_status', sa.String(20), nullable=False),
        sa.Column('transaction_id', sa.String(100), index=True),
        sa.Column('payment_time', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        'bulk_upload_logs',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('uploaded_by', sa.Integer, sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.Column('filename', sa.String(255), nullable=False),
        sa.Column('model', sa.String(50), nullable=False),
        sa.Column('total_records', sa.Integer, nullable=False),
        sa.Column('success_count', sa.Integer, nullable=False),
        sa.Column('failure_count', sa.Integer, nullable=False),
        sa.Column('skipped_count', sa.Integer, nullable=False),
        sa.Column('upload_time', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    """Downgrade schema."""
    for table in ('bulk_upload_logs', 'payments', 'job_applications', 'jobs', 'skills',
                  'employment_details', 'education_details', 'family_members', 'profiles', 'users'):
        op.drop_table(table)
    if op.get_bind().dialect.name == 'postgresql':
        op.execute('DROP TYPE IF EXISTS userrole CASCADE')
