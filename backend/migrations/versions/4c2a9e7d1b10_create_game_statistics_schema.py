"""create users, players, characters, scripts, games and participations

Revision ID: 4c2a9e7d1b10
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2a9e7d1b10'
down_revision = None
branch_labels = None
depends_on = None

ALIGNMENTS = ('GOOD', 'EVIL')
CHARACTER_TYPES = ('TOWNSFOLK', 'OUTSIDER', 'MINION', 'DEMON', 'TRAVELLER')


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)

    op.create_table(
        'player',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('user.id', ondelete='SET NULL'), nullable=True, unique=True),
    )

    op.create_table(
        'character',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('script_tool_identifier', sa.String(length=128), nullable=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('character_type', sa.Enum(*CHARACTER_TYPES, name='character_type'), nullable=False),
        sa.Column('wiki_page', sa.String(length=512), nullable=True),
        sa.Column('image_url', sa.String(length=512), nullable=True),
    )

    op.create_table(
        'script',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('wiki_page', sa.String(length=512), nullable=True),
    )

    op.create_table(
        'script_character',
        sa.Column('script_id', sa.Integer(), sa.ForeignKey('script.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('character_id', sa.Integer(), sa.ForeignKey('character.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'game',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('description', sa.String(length=5000), nullable=True),
        sa.Column('script_id', sa.Integer(), sa.ForeignKey('script.id', ondelete='SET NULL'), nullable=True),
        sa.Column('winning_alignment', sa.Enum(*ALIGNMENTS, name='alignment'), nullable=True),
    )

    op.create_table(
        'game_winning_player',
        sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'game_storyteller',
        sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'participation',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('game_id', sa.Integer(), sa.ForeignKey('game.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.Integer(), sa.ForeignKey('player.id', ondelete='SET NULL'), nullable=True),
        sa.Column('initial_character_id', sa.Integer(), sa.ForeignKey('character.id', ondelete='SET NULL'), nullable=True),
        sa.Column('initial_alignment', sa.Enum(*ALIGNMENTS, name='alignment'), nullable=True),
        sa.Column('end_character_id', sa.Integer(), sa.ForeignKey('character.id', ondelete='SET NULL'), nullable=True),
        sa.Column('end_alignment', sa.Enum(*ALIGNMENTS, name='alignment'), nullable=True),
        sa.Column('alive_at_end', sa.Boolean(), nullable=False),
    )


def downgrade():
    op.drop_table('participation')
    op.drop_table('game_storyteller')
    op.drop_table('game_winning_player')
    op.drop_table('game')
    op.drop_table('script_character')
    op.drop_table('script')
    op.drop_table('character')
    op.drop_table('player')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
