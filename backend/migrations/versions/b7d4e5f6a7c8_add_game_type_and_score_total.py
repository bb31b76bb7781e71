"""add game_type to games (backfilled to everdell) and total to scores

Revision ID: b7d4e5f6a7c8
Revises: a1c0d2e3f4b5
Create Date: 2025-07-02 18:45:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b7d4e5f6a7c8'
down_revision = 'a1c0d2e3f4b5'
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Every game recorded before variants existed was an Everdell game
    game_cols = {c['name'] for c in insp.get_columns('games')}
    if 'game_type' not in game_cols:
        with op.batch_alter_table('games') as batch_op:
            batch_op.add_column(sa.Column('game_type', sa.String(length=32), nullable=True))
        op.execute("UPDATE games SET game_type = 'everdell' WHERE game_type IS NULL")

    score_cols = {c['name'] for c in insp.get_columns('scores')}
    if 'total' not in score_cols:
        with op.batch_alter_table('scores') as batch_op:
            batch_op.add_column(sa.Column('total', sa.Integer(), nullable=True))


def downgrade():
    with op.batch_alter_table('scores') as batch_op:
        batch_op.drop_column('total')
    with op.batch_alter_table('games') as batch_op:
        batch_op.drop_column('game_type')
