"""NFT catalog with comments, partner contest memes and votes.

Revision ID: 002_nfts_and_partners
Revises: 001_initial
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_nfts_and_partners"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column(
        "created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now(),
    )


def upgrade() -> None:
    op.create_table(
        "nfts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.Text, nullable=False),
        _created_at(),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("nft_id", sa.Integer, sa.ForeignKey("nfts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("author_wallet", sa.String(64), nullable=False),
        sa.Column("author_username", sa.String(100), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        _created_at(),
    )
    op.create_index("ix_comments_nft_id", "comments", ["nft_id"])

    op.create_table(
        "partner_memes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("partner_id", sa.String(32), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.Text, nullable=False),
        sa.Column("author_wallet", sa.String(64), nullable=False),
        sa.Column("author_username", sa.String(100), nullable=False),
        sa.Column("author_avatar_url", sa.String(1024), nullable=True),
        sa.Column("votes", sa.BigInteger, nullable=False, server_default="0"),
        _created_at(),
    )
    op.create_index("ix_partner_memes_partner_id", "partner_memes", ["partner_id"])
    op.create_index("ix_partner_memes_author_wallet", "partner_memes", ["author_wallet"])

    op.create_table(
        "partner_votes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("partner_id", sa.String(32), nullable=False),
        sa.Column(
            "meme_id", sa.Integer,
            sa.ForeignKey("partner_memes.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("voter_wallet", sa.String(64), nullable=False),
        sa.Column("voting_power", sa.BigInteger, nullable=False),
        _created_at(),
        sa.UniqueConstraint(
            "partner_id", "meme_id", "voter_wallet", name="uq_partner_vote_wallet",
        ),
    )
    op.create_index("ix_partner_votes_meme_id", "partner_votes", ["meme_id"])
    op.create_index("ix_partner_votes_voter_wallet", "partner_votes", ["voter_wallet"])


def downgrade() -> None:
    op.drop_table("partner_votes")
    op.drop_table("partner_memes")
    op.drop_table("comments")
    op.drop_table("nfts")
