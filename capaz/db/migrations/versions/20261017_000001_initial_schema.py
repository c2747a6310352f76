"""initial_schema

Revision ID: 20261017_000001
Revises:
Create Date: 2026-10-17 00:00:01.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create organizations, users, catalog and assessment tables."""
    op.create_table(
        'organizations',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('type', sa.String(32), nullable=False),
        sa.Column('parent_org_id', sa.String(64), sa.ForeignKey('organizations.id'), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("type IN ('PLATFORM_OWNER', 'MSP_RESELLER', 'END_CLIENT')", name='check_org_type'),
        sa.CheckConstraint("type != 'PLATFORM_OWNER' OR parent_org_id IS NULL", name='check_platform_owner_is_root'),
        sa.CheckConstraint("type != 'END_CLIENT' OR parent_org_id IS NOT NULL", name='check_end_client_has_parent'),
    )
    op.create_index('ix_organizations_slug', 'organizations', ['slug'], unique=True)
    op.create_index('ix_organizations_parent_org_id', 'organizations', ['parent_org_id'])

    op.create_table(
        'users',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('hashed_password', sa.Text(), nullable=True),
        sa.Column('first_name', sa.Text(), nullable=False),
        sa.Column('last_name', sa.Text(), nullable=False),
        sa.Column('job_title', sa.Text(), nullable=True),
        sa.Column('department', sa.Text(), nullable=True),
        sa.Column('language', sa.String(16), nullable=True),
        sa.Column('timezone', sa.String(64), nullable=True),
        sa.Column('role', sa.String(32), nullable=False),
        sa.Column('organization_id', sa.String(64), sa.ForeignKey('organizations.id'), nullable=False),
        sa.Column('manager_id', sa.String(64), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('is_trainer', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_project_lead', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_mentor', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "role IN ('PLATFORM_ADMIN', 'ORG_ADMIN', 'MANAGER', 'USER')", name='check_user_role'
        ),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_department', 'users', ['department'])
    op.create_index('ix_users_organization_id', 'users', ['organization_id'])
    op.create_index('ix_users_manager_id', 'users', ['manager_id'])
    op.create_index('idx_users_org_active', 'users', ['organization_id', 'is_active'])

    op.create_table(
        'skill_categories',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('organization_id', sa.String(64), sa.ForeignKey('organizations.id'), nullable=True),
        sa.Column('is_template', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('template_type', sa.String(32), nullable=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon', sa.String(64), nullable=True),
        sa.Column('parent_category_id', sa.String(64), sa.ForeignKey('skill_categories.id'), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint(
            "(is_template AND organization_id IS NULL) "
            "OR (NOT is_template AND organization_id IS NOT NULL)",
            name='check_category_scope',
        ),
    )
    op.create_index('ix_skill_categories_organization_id', 'skill_categories', ['organization_id'])
    op.create_index('ix_skill_categories_parent_category_id', 'skill_categories', ['parent_category_id'])
    op.create_index('idx_categories_org_active', 'skill_categories', ['organization_id', 'is_active'])

    op.create_table(
        'skills',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('category_id', sa.String(64), sa.ForeignKey('skill_categories.id'), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('tooltip', sa.Text(), nullable=True),
        sa.Column('level_descriptions', sa.JSON(), nullable=False),
        sa.Column('is_certifiable', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('certification_names', sa.JSON(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_skills_category_id', 'skills', ['category_id'])

    op.create_table(
        'assessments',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('user_id', sa.String(64), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('is_complete', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_current', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint('version >= 1', name='check_assessment_version_positive'),
        sa.UniqueConstraint('user_id', 'version', name='uq_assessment_user_version'),
    )
    op.create_index('ix_assessments_user_id', 'assessments', ['user_id'])
    # At most one current assessment per user
    op.create_index(
        'idx_assessment_current_unique',
        'assessments',
        ['user_id'],
        unique=True,
        postgresql_where=sa.text('is_current = true'),
        sqlite_where=sa.text('is_current = 1'),
    )

    op.create_table(
        'assessment_responses',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column(
            'assessment_id', sa.String(64),
            sa.ForeignKey('assessments.id', ondelete='CASCADE'), nullable=False,
        ),
        sa.Column('skill_id', sa.String(64), sa.ForeignKey('skills.id'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('interest_level', sa.Integer(), nullable=True),
        sa.Column('growth_desire', sa.Integer(), nullable=True),
        sa.Column('use_frequency', sa.Integer(), nullable=True),
        sa.Column('mentor_level', sa.Integer(), nullable=True),
        sa.Column('lead_level', sa.Integer(), nullable=True),
        sa.Column('years_experience', sa.Integer(), nullable=True),
        sa.Column('last_used', sa.DateTime(timezone=True), nullable=True),
        sa.Column('training_source', sa.Text(), nullable=True),
        sa.Column('certifications', sa.JSON(), nullable=True),
        sa.Column('future_willingness', sa.Integer(), nullable=True),
        sa.Column('mobility_for_skill', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('willing_to_use', sa.Boolean(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.UniqueConstraint('assessment_id', 'skill_id', name='uq_response_assessment_skill'),
        sa.CheckConstraint('level BETWEEN 0 AND 5', name='check_response_level'),
        sa.CheckConstraint('interest_level IS NULL OR interest_level BETWEEN 1 AND 5', name='check_response_interest'),
        sa.CheckConstraint('growth_desire IS NULL OR growth_desire BETWEEN 1 AND 5', name='check_response_growth'),
        sa.CheckConstraint('use_frequency IS NULL OR use_frequency BETWEEN 1 AND 5', name='check_response_frequency'),
        sa.CheckConstraint('mentor_level IS NULL OR mentor_level BETWEEN 0 AND 3', name='check_response_mentor'),
        sa.CheckConstraint('lead_level IS NULL OR lead_level BETWEEN 0 AND 3', name='check_response_lead'),
        sa.CheckConstraint(
            'years_experience IS NULL OR years_experience BETWEEN 0 AND 50', name='check_response_years'
        ),
        sa.CheckConstraint(
            'future_willingness IS NULL OR future_willingness BETWEEN 1 AND 4', name='check_response_willingness'
        ),
    )
    op.create_index('ix_assessment_responses_assessment_id', 'assessment_responses', ['assessment_id'])
    op.create_index('ix_assessment_responses_skill_id', 'assessment_responses', ['skill_id'])


def downgrade() -> None:
    """Drop all Capaz tables."""
    op.drop_table('assessment_responses')
    op.drop_index('idx_assessment_current_unique', table_name='assessments')
    op.drop_table('assessments')
    op.drop_table('skills')
    op.drop_table('skill_categories')
    op.drop_table('users')
    op.drop_table('organizations')
