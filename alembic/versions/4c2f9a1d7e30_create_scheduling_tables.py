"""create scheduling tables

Revision ID: 4c2f9a1d7e30
Revises:
Create Date: 2026-10-19 09:12:41.512204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4c2f9a1d7e30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Tenants
    op.create_table(
        'businesses',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('timezone', sa.String(50), server_default='UTC'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('is_active', sa.Boolean, server_default=sa.true())
    )

    # 2. People
    op.create_table(
        'customers',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('email', sa.String, nullable=True),
        sa.Column('phone', sa.String(20), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_customers_business_id', 'customers', ['business_id'])

    op.create_table(
        'staff_members',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String, nullable=True),
        sa.Column('is_active', sa.Boolean, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )
    op.create_index('ix_staff_members_business_id', 'staff_members', ['business_id'])
    op.create_index('ix_staff_members_is_active', 'staff_members', ['is_active'])

    # 3. Services and eligibility
    op.create_table(
        'services',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('duration_minutes', sa.Integer, nullable=False, server_default='60'),
        sa.Column('buffer_before_minutes', sa.Integer, nullable=False, server_default='0'),
        sa.Column('buffer_after_minutes', sa.Integer, nullable=False, server_default='0'),
        sa.Column('capacity_type', sa.String(10), nullable=False, server_default='SINGLE'),
        sa.Column('max_clients_per_slot', sa.Integer, nullable=False, server_default='1'),
        sa.Column('allow_any_staff', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean, server_default=sa.true()),
        sa.Column('display_order', sa.Integer, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('max_clients_per_slot >= 1', name='ck_services_max_clients_positive'),
        sa.CheckConstraint(
            'buffer_before_minutes BETWEEN 0 AND 1440 AND buffer_after_minutes BETWEEN 0 AND 1440',
            name='ck_services_buffers_bounded'
        ),
        sa.CheckConstraint(
            "capacity_type <> 'SINGLE' OR max_clients_per_slot = 1",
            name='ck_services_single_has_one_seat'
        )
    )
    op.create_index('ix_services_business_id', 'services', ['business_id'])
    op.create_index('ix_services_is_active', 'services', ['is_active'])

    op.create_table(
        'service_staff',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.Column('staff_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('staff_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('display_order', sa.Integer, nullable=False, server_default='0'),
        sa.Column('is_primary', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('service_id', 'staff_id', name='uq_service_staff_pair')
    )
    op.create_index('ix_service_staff_business_id', 'service_staff', ['business_id'])
    op.create_index('ix_service_staff_service_id', 'service_staff', ['service_id'])
    op.create_index('ix_service_staff_staff_id', 'service_staff', ['staff_id'])

    # 4. Availability
    op.create_table(
        'availability_blocks',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('staff_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('staff_members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('is_override', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('day_of_week', sa.Integer, nullable=True),
        sa.Column('date', sa.Date, nullable=True),
        sa.Column('start_time', sa.String(5), nullable=False),
        sa.Column('end_time', sa.String(5), nullable=False),
        sa.Column('is_available', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('reason', sa.String, nullable=True),
        sa.CheckConstraint(
            '(is_override AND date IS NOT NULL AND day_of_week IS NULL) OR '
            '(NOT is_override AND date IS NULL AND day_of_week IS NOT NULL)',
            name='ck_availability_blocks_override_xor_weekly'
        ),
        sa.CheckConstraint('end_time > start_time', name='ck_availability_blocks_end_after_start')
    )
    op.create_index('ix_availability_blocks_business_id', 'availability_blocks', ['business_id'])
    op.create_index('ix_availability_blocks_staff_id', 'availability_blocks', ['staff_id'])
    op.create_index('ix_availability_blocks_date', 'availability_blocks', ['date'])

    # 5. Appointments
    op.create_table(
        'appointments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('service_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('services.id'), nullable=False),
        sa.Column('staff_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('staff_members.id'), nullable=True),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('customers.id'), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('source', sa.String(20), nullable=False, server_default='INTERNAL'),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('customer_notes', sa.Text, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancellation_reason', sa.Text, nullable=True)
    )
    op.create_index(
        'ix_appointments_staff_window', 'appointments', ['business_id', 'staff_id', 'start_time', 'end_time']
    )
    op.create_index(
        'ix_appointments_service_window', 'appointments', ['business_id', 'service_id', 'start_time', 'end_time']
    )

    # 6. Classes
    op.create_table(
        'class_templates',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('class_type', sa.String(20), nullable=True),
        sa.Column('duration_minutes', sa.Integer, nullable=False),
        sa.Column('default_capacity', sa.Integer, nullable=False),
        sa.Column('default_instructor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('staff_members.id'), nullable=True),
        sa.Column('is_active', sa.Boolean, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('duration_minutes > 0', name='ck_class_templates_duration_positive'),
        sa.CheckConstraint('default_capacity >= 1', name='ck_class_templates_capacity_positive')
    )
    op.create_index('ix_class_templates_business_id', 'class_templates', ['business_id'])

    op.create_table(
        'class_occurrences',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('template_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('class_templates.id'), nullable=False),
        sa.Column('instructor_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('staff_members.id'), nullable=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('timezone', sa.String(50), nullable=True),
        sa.Column('capacity', sa.Integer, nullable=False),
        sa.Column('booked_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('waitlist_count', sa.Integer, nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='SCHEDULED'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint('booked_count >= 0', name='ck_class_occurrences_booked_non_negative'),
        sa.CheckConstraint('waitlist_count >= 0', name='ck_class_occurrences_waitlist_non_negative')
    )
    op.create_index('ix_class_occurrences_business_id', 'class_occurrences', ['business_id'])
    op.create_index('ix_class_occurrences_template_id', 'class_occurrences', ['template_id'])

    # 7. Waitlists
    op.create_table(
        'waitlist_entries',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('business_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('businesses.id'), nullable=False),
        sa.Column('class_occurrence_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('class_occurrences.id', ondelete='CASCADE'), nullable=False),
        sa.Column('customer_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('customers.id'), nullable=False),
        sa.Column('position', sa.Integer, nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='PENDING'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('promoted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('removed_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('class_occurrence_id', 'position', name='uq_waitlist_entries_occurrence_position')
    )
    op.create_index('ix_waitlist_entries_business_id', 'waitlist_entries', ['business_id'])
    op.create_index('ix_waitlist_entries_class_occurrence_id', 'waitlist_entries', ['class_occurrence_id'])


def downgrade() -> None:
    """Downgrade schema."""

    # Drop tables in reverse order (due to foreign keys)
    op.drop_table('waitlist_entries')
    op.drop_table('class_occurrences')
    op.drop_table('class_templates')
    op.drop_table('appointments')
    op.drop_table('availability_blocks')
    op.drop_table('service_staff')
    op.drop_table('services')
    op.drop_table('staff_members')
    op.drop_table('customers')
    op.drop_table('businesses')
