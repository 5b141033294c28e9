"""add charging sessions

Revision ID: 001_add_charging_sessions
Revises:
Create Date: 2026-10-18 12:00:00.000000

Adds the charging_sessions table with the station snapshot columns and the
one-active-session-per-user partial unique index
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_add_charging_sessions'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create charging_sessions table"""
    op.create_table(
        'charging_sessions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('station_id', sa.String(), nullable=False),
        sa.Column('station_name', sa.String(), nullable=False),
        sa.Column('connector_id', sa.String(), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('energy_delivered', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_cost', sa.Float(), nullable=False, server_default='0'),
        sa.Column('average_power', sa.Float(), nullable=False, server_default='0'),
        sa.Column('battery_level', sa.Float(), nullable=False),
        sa.Column('battery_level_start', sa.Float(), nullable=False),
        sa.Column('status', sa.String(9), nullable=False, server_default='active'),
        sa.Column('station_rating', sa.Integer(), nullable=True),
        sa.Column('station_address', sa.String(), nullable=True),
        sa.Column('station_location', sa.JSON(), nullable=True),
        sa.Column('station_price_per_kwh', sa.Float(), nullable=True),
        sa.Column('station_power_output', sa.Float(), nullable=True),
        sa.Column('station_connector_types', sa.JSON(), nullable=True),
        sa.Column('station_amenities', sa.JSON(), nullable=True),
        sa.Column('station_operating_hours', sa.String(), nullable=True),
        sa.Column('station_is_company_station', sa.Boolean(), nullable=True),
        sa.Column('station_realtime_availability', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    # Indexes
    op.create_index('ix_charging_sessions_user_id', 'charging_sessions', ['user_id'])
    op.create_index('ix_charging_sessions_status', 'charging_sessions', ['status'])
    op.create_index('ix_charging_sessions_user_status', 'charging_sessions', ['user_id', 'status'])
    op.create_index('ix_charging_sessions_user_start', 'charging_sessions', ['user_id', 'start_time'])
    op.create_index(
        'uq_charging_sessions_one_active_per_user',
        'charging_sessions',
        ['user_id'],
        unique=True,
        sqlite_where=sa.text("status = 'active'"),
        postgresql_where=sa.text("status = 'active'"),
    )


def downgrade() -> None:
    """Drop charging_sessions table"""
    op.drop_index('uq_charging_sessions_one_active_per_user', table_name='charging_sessions')
    op.drop_index('ix_charging_sessions_user_start', table_name='charging_sessions')
    op.drop_index('ix_charging_sessions_user_status', table_name='charging_sessions')
    op.drop_index('ix_charging_sessions_status', table_name='charging_sessions')
    op.drop_index('ix_charging_sessions_user_id', table_name='charging_sessions')
    op.drop_table('charging_sessions')
