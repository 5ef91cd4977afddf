"""Create core collections

Revision ID: 20261018_000001
Revises: None
Create Date: 2026-10-18

This migration creates the properties, units, tenants, leases, payments,
maintenance, users and activities tables. References between them are plain
id strings checked by the application, so there are no foreign key
constraints; each record carries a version column for optimistic locking.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261018_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _record_columns():
    """Columns every collection shares."""
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    ]


def _money(name, nullable=True):
    return sa.Column(name, sa.Numeric(precision=12, scale=2), nullable=nullable)


def upgrade() -> None:
    """Create the core tables."""
    op.create_table(
        'properties',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('address', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(20), nullable=False, server_default='residential'),
        sa.Column('total_units', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('manager_id', sa.String(128), nullable=True),
        sa.Column('manager_name', sa.String(255), nullable=True),
        *_record_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_properties_manager_id', 'properties', ['manager_id'])

    op.create_table(
        'units',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('property_id', sa.String(36), nullable=False),
        sa.Column('property_name', sa.String(255), nullable=True),
        sa.Column('unit_number', sa.String(50), nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='studio'),
        _money('rent', nullable=False),
        _money('deposit', nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='vacant'),
        sa.Column('tenant_id', sa.String(36), nullable=True),
        sa.Column('tenant_name', sa.String(255), nullable=True),
        *_record_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_units_property_id', 'units', ['property_id'])
    op.create_index('ix_units_status', 'units', ['status'])
    op.create_index('ix_units_tenant_id', 'units', ['tenant_id'])

    op.create_table(
        'tenants',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('id_number', sa.String(100), nullable=False),
        sa.Column('unit_id', sa.String(36), nullable=True),
        sa.Column('unit_number', sa.String(50), nullable=True),
        sa.Column('property_id', sa.String(36), nullable=True),
        sa.Column('property_name', sa.String(255), nullable=True),
        sa.Column('lease_start_date', sa.DateTime(), nullable=True),
        sa.Column('lease_end_date', sa.DateTime(), nullable=True),
        _money('rent'),
        _money('deposit'),
        sa.Column('emergency_contact', sa.JSON(), nullable=False),
        *_record_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_tenants_name', 'tenants', ['name'])
    op.create_index('ix_tenants_unit_id', 'tenants', ['unit_id'])
    op.create_index('ix_tenants_property_id', 'tenants', ['property_id'])

    op.create_table(
        'leases',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('tenant_id', sa.String(36), nullable=False),
        sa.Column('tenant_name', sa.String(255), nullable=True),
        sa.Column('unit_id', sa.String(36), nullable=False),
        sa.Column('unit_number', sa.String(50), nullable=True),
        sa.Column('property_id', sa.String(36), nullable=False),
        sa.Column('property_name', sa.String(255), nullable=True),
        _money('monthly_rent', nullable=False),
        _money('security_deposit', nullable=False),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('lease_type', sa.String(20), nullable=False, server_default='fixed'),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        sa.Column('renewal_option', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('last_renewal_date', sa.DateTime(), nullable=True),
        sa.Column('renewal_notice_date', sa.DateTime(), nullable=True),
        sa.Column('terminated_at', sa.DateTime(), nullable=True),
        sa.Column('special_terms', sa.Text(), nullable=True),
        sa.Column('pet_policy', sa.String(20), nullable=True),
        sa.Column('smoking_policy', sa.String(20), nullable=True),
        sa.Column('utilities_included', sa.JSON(), nullable=False),
        sa.Column('parking_spaces', sa.Integer(), nullable=True),
        _money('late_fee_penalty'),
        _money('early_termination_fee'),
        sa.Column('maintenance_responsibility', sa.String(20), nullable=True),
        sa.Column('document_url', sa.String(500), nullable=True),
        *_record_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_leases_tenant_id', 'leases', ['tenant_id'])
    op.create_index('ix_leases_unit_id', 'leases', ['unit_id'])
    op.create_index('ix_leases_property_id', 'leases', ['property_id'])
    op.create_index('ix_leases_end_date', 'leases', ['end_date'])
    op.create_index('ix_leases_status', 'leases', ['status'])

    op.create_table(
        'payments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('tenant_id', sa.String(36), nullable=False),
        sa.Column('tenant_name', sa.String(255), nullable=True),
        sa.Column('unit_id', sa.String(36), nullable=False),
        sa.Column('unit_number', sa.String(50), nullable=True),
        sa.Column('property_id', sa.String(36), nullable=False),
        sa.Column('property_name', sa.String(255), nullable=True),
        _money('amount', nullable=False),
        sa.Column('type', sa.String(20), nullable=False, server_default='rent'),
        sa.Column('method', sa.String(20), nullable=True),
        sa.Column('reference_number', sa.String(100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('due_date', sa.DateTime(), nullable=False),
        sa.Column('paid_date', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        *_record_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_payments_tenant_id', 'payments', ['tenant_id'])
    op.create_index('ix_payments_unit_id', 'payments', ['unit_id'])
    op.create_index('ix_payments_property_id', 'payments', ['property_id'])
    op.create_index('ix_payments_due_date', 'payments', ['due_date'])
    op.create_index('ix_payments_status', 'payments', ['status'])

    op.create_table(
        'maintenance',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('property_id', sa.String(36), nullable=False),
        sa.Column('property_name', sa.String(255), nullable=True),
        sa.Column('unit_id', sa.String(36), nullable=True),
        sa.Column('unit_number', sa.String(50), nullable=True),
        sa.Column('tenant_id', sa.String(36), nullable=True),
        sa.Column('tenant_name', sa.String(255), nullable=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(20), nullable=False, server_default='other'),
        sa.Column('priority', sa.String(20), nullable=False, server_default='medium'),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('assigned_to', sa.String(255), nullable=True),
        _money('estimated_cost'),
        _money('actual_cost'),
        sa.Column('reported_date', sa.DateTime(), nullable=True),
        sa.Column('scheduled_date', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        *_record_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_maintenance_property_id', 'maintenance', ['property_id'])
    op.create_index('ix_maintenance_unit_id', 'maintenance', ['unit_id'])
    op.create_index('ix_maintenance_tenant_id', 'maintenance', ['tenant_id'])
    op.create_index('ix_maintenance_status', 'maintenance', ['status'])
    op.create_index('ix_maintenance_created_at', 'maintenance', ['created_at'])

    op.create_table(
        'users',
        sa.Column('id', sa.String(128), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('role', sa.String(20), nullable=False, server_default='admin'),
        sa.Column('property_ids', sa.JSON(), nullable=False),
        *_record_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'activities',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('action', sa.String(500), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('property_id', sa.String(36), nullable=True),
        *_record_columns(),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_activities_user_id', 'activities', ['user_id'])
    op.create_index('ix_activities_property_id', 'activities', ['property_id'])
    op.create_index('ix_activities_created_at', 'activities', ['created_at'])


def downgrade() -> None:
    """Drop the core tables."""
    for table in ('activities', 'users', 'maintenance', 'payments', 'leases', 'tenants', 'units', 'properties'):
        op.drop_table(table)
