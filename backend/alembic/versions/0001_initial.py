from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        "player",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("nickname", sa.String(100), nullable=False, server_default=""),
        sa.Column("avatar_emoji", sa.String(32), nullable=False, server_default="🏓"),
    )
    # id is the reverse-timestamp key; participant ids are deliberately not
    # foreign keys so deleting a player never touches recorded matches.
    op.create_table(
        "match",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("winner1_id", sa.String(64), nullable=False),
        sa.Column("winner2_id", sa.String(64), nullable=False),
        sa.Column("loser1_id", sa.String(64), nullable=False),
        sa.Column("loser2_id", sa.String(64), nullable=False),
        sa.Column("winner_score", sa.Integer(), nullable=True),
        sa.Column("loser_score", sa.Integer(), nullable=True),
        sa.Column("comment", sa.Text(), nullable=False, server_default=""),
        sa.Column("recorded_by", sa.String(), nullable=False),
        sa.Column("played_at", sa.String(40), nullable=False),
    )

def downgrade():
    op.drop_table("match")
    op.drop_table("player")
