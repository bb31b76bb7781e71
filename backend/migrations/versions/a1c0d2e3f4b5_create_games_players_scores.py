"""create games, players and scores tables

Revision ID: a1c0d2e3f4b5
Revises:
Create Date: 2025-06-14 10:20:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c0d2e3f4b5'
down_revision = None
branch_labels = None
depends_on = None

BREAKDOWN_COLUMNS = (
    'legacy_score',
    'base_cards',
    'extra_vp',
    'basic_events',
    'special_events',
    'prosperity_cards',
    'visitors',
    'journey',
    'garland_award',
)


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Databases created by earlier releases already have these tables; leave them be.
    existing_tables = set(insp.get_table_names())

    if 'games' not in existing_tables:
        op.create_table(
            'games',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('game_date', sa.String(length=64), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sqlite_autoincrement=True,
        )
    if 'players' not in existing_tables:
        op.create_table(
            'players',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.Text(), nullable=False),
            sa.PrimaryKeyConstraint('id'),
            sa.UniqueConstraint('name'),
            sqlite_autoincrement=True,
        )
    if 'scores' not in existing_tables:
        op.create_table(
            'scores',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('game_id', sa.Integer(), nullable=False),
            sa.Column('player_id', sa.Integer(), nullable=False),
            *[sa.Column(name, sa.Integer(), nullable=True) for name in BREAKDOWN_COLUMNS],
            sa.ForeignKeyConstraint(['game_id'], ['games.id'], ondelete='CASCADE'),
            sa.ForeignKeyConstraint(['player_id'], ['players.id']),
            sa.PrimaryKeyConstraint('id'),
            sqlite_autoincrement=True,
        )


def downgrade():
    op.drop_table('scores')
    op.drop_table('players')
    op.drop_table('games')
