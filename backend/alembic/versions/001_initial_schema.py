"""Initial schema — users, contests, memes, votes, goods, orders, escrow, rewards, revenue.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*names: str) -> list[sa.Column]:
    return [
        sa.Column(name, sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())
        for name in names
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("wallet_address", sa.String(64), nullable=False, unique=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("avatar_url", sa.String(1024), nullable=True),
        sa.Column("samu_balance", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_voting_power", sa.BigInteger, nullable=False, server_default="0"),
        *_timestamps("created_at", "updated_at"),
    )
    op.create_index("ix_users_wallet_address", "users", ["wallet_address"])

    op.create_table(
        "contests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="draft"),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_by", sa.String(255), nullable=True),
        *_timestamps("created_at"),
    )
    op.create_index("ix_contests_status", "contests", ["status"])

    op.create_table(
        "archived_contests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("original_contest_id", sa.Integer, sa.ForeignKey("contests.id"), nullable=False, unique=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("winner_meme_id", sa.Integer, nullable=True),
        sa.Column("total_memes", sa.Integer, nullable=False, server_default="0"),
        sa.Column("total_votes", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps("archived_at"),
    )

    op.create_table(
        "memes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.Text, nullable=False),
        sa.Column("author_wallet", sa.String(64), nullable=False),
        sa.Column("author_username", sa.String(100), nullable=False),
        sa.Column("author_avatar_url", sa.String(1024), nullable=True),
        sa.Column("contest_id", sa.Integer, sa.ForeignKey("contests.id"), nullable=True),
        sa.Column("is_archived", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("votes", sa.BigInteger, nullable=False, server_default="0"),
        *_timestamps("created_at"),
    )
    op.create_index("ix_memes_author_wallet", "memes", ["author_wallet"])
    op.create_index("ix_memes_contest_id", "memes", ["contest_id"])

    op.create_table(
        "votes",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("meme_id", sa.Integer, sa.ForeignKey("memes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("contest_id", sa.Integer, nullable=True),
        sa.Column("voter_wallet", sa.String(64), nullable=False),
        sa.Column("samu_amount", sa.BigInteger, nullable=False),
        sa.Column("tx_signature", sa.String(128), nullable=False, unique=True),
        *_timestamps("created_at"),
    )
    op.create_index("ix_votes_meme_id", "votes", ["meme_id"])
    op.create_index("ix_votes_contest_id", "votes", ["contest_id"])
    op.create_index("ix_votes_voter_wallet", "votes", ["voter_wallet"])

    op.create_table(
        "goods",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("printful_product_id", sa.Integer, nullable=True),
        sa.Column("printful_variant_id", sa.Integer, nullable=True),
        sa.Column("contest_id", sa.Integer, sa.ForeignKey("contests.id"), nullable=True),
        sa.Column("meme_id", sa.Integer, nullable=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("image_url", sa.Text, nullable=False),
        sa.Column("mockup_urls", sa.JSON, nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="clothing"),
        sa.Column("product_type", sa.String(50), nullable=False, server_default="t-shirt"),
        sa.Column("base_price", sa.Float, nullable=False),
        sa.Column("retail_price", sa.Float, nullable=False),
        sa.Column("sizes", sa.JSON, nullable=False),
        sa.Column("colors", sa.JSON, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        *_timestamps("created_at"),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("goods_id", sa.Integer, sa.ForeignKey("goods.id"), nullable=False),
        sa.Column("buyer_wallet", sa.String(64), nullable=False),
        sa.Column("buyer_email", sa.String(255), nullable=False),
        sa.Column("printful_order_id", sa.BigInteger, nullable=True),
        sa.Column("size", sa.String(10), nullable=False),
        sa.Column("color", sa.String(30), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("total_price", sa.Float, nullable=False),
        sa.Column("sol_amount_lamports", sa.BigInteger, nullable=True),
        sa.Column("payment_tx_signature", sa.String(128), nullable=True, unique=True),
        sa.Column("shipping_name", sa.String(200), nullable=False),
        sa.Column("shipping_address1", sa.String(255), nullable=False),
        sa.Column("shipping_address2", sa.String(255), nullable=True),
        sa.Column("shipping_city", sa.String(100), nullable=False),
        sa.Column("shipping_state", sa.String(100), nullable=True),
        sa.Column("shipping_country", sa.String(2), nullable=False),
        sa.Column("shipping_zip", sa.String(20), nullable=False),
        sa.Column("shipping_phone", sa.String(40), nullable=True),
        sa.Column("shipping_lat", sa.Float, nullable=True),
        sa.Column("shipping_lng", sa.Float, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("printful_status", sa.String(30), nullable=True),
        sa.Column("tracking_number", sa.String(100), nullable=True),
        sa.Column("tracking_url", sa.String(1024), nullable=True),
        *_timestamps("created_at", "updated_at"),
    )
    op.create_index("ix_orders_goods_id", "orders", ["goods_id"])
    op.create_index("ix_orders_buyer_wallet", "orders", ["buyer_wallet"])
    op.create_index("ix_orders_printful_order_id", "orders", ["printful_order_id"])

    op.create_table(
        "escrows",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id"), nullable=False, unique=True),
        sa.Column("amount_lamports", sa.BigInteger, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="held"),
        *_timestamps("created_at"),
        sa.Column("settled_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        "goods_revenue_distributions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id"), nullable=False, unique=True),
        sa.Column("goods_id", sa.Integer, nullable=False),
        sa.Column("contest_id", sa.Integer, nullable=True),
        sa.Column("creator_wallet", sa.String(64), nullable=True),
        sa.Column("platform_wallet", sa.String(64), nullable=False),
        sa.Column("total_lamports", sa.BigInteger, nullable=False),
        sa.Column("creator_lamports", sa.BigInteger, nullable=False),
        sa.Column("voter_pool_lamports", sa.BigInteger, nullable=False),
        sa.Column("platform_lamports", sa.BigInteger, nullable=False),
        *_timestamps("created_at"),
    )
    op.create_index(
        "ix_goods_revenue_distributions_contest_id",
        "goods_revenue_distributions", ["contest_id"],
    )

    op.create_table(
        "voter_reward_pools",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("contest_id", sa.Integer, nullable=False, unique=True),
        sa.Column("total_weight", sa.BigInteger, nullable=False),
        sa.Column("snapshot_vote_id", sa.Integer, nullable=False, server_default="0"),
        sa.Column("reward_per_share", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_deposited_lamports", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_claimed_lamports", sa.BigInteger, nullable=False, server_default="0"),
        *_timestamps("created_at", "updated_at"),
    )

    op.create_table(
        "voter_claims",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("contest_id", sa.Integer, nullable=False),
        sa.Column("wallet_address", sa.String(64), nullable=False),
        sa.Column("weight", sa.BigInteger, nullable=False),
        sa.Column("last_reward_per_share", sa.BigInteger, nullable=False, server_default="0"),
        sa.Column("total_claimed_lamports", sa.BigInteger, nullable=False, server_default="0"),
        *_timestamps("created_at", "updated_at"),
        sa.UniqueConstraint("contest_id", "wallet_address", name="uq_voter_claim_wallet"),
    )
    op.create_index("ix_voter_claims_contest_id", "voter_claims", ["contest_id"])
    op.create_index("ix_voter_claims_wallet_address", "voter_claims", ["wallet_address"])

    op.create_table(
        "revenues",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("contest_id", sa.Integer, nullable=False),
        sa.Column("source", sa.String(100), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("total_lamports", sa.BigInteger, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("distributed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps("created_at"),
    )
    op.create_index("ix_revenues_contest_id", "revenues", ["contest_id"])

    op.create_table(
        "revenue_shares",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("revenue_id", sa.Integer, sa.ForeignKey("revenues.id"), nullable=False),
        sa.Column("contest_id", sa.Integer, nullable=False),
        sa.Column("wallet_address", sa.String(64), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("share_percent", sa.Float, nullable=False),
        sa.Column("amount_lamports", sa.BigInteger, nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        *_timestamps("created_at"),
    )
    op.create_index("ix_revenue_shares_revenue_id", "revenue_shares", ["revenue_id"])
    op.create_index("ix_revenue_shares_contest_id", "revenue_shares", ["contest_id"])
    op.create_index("ix_revenue_shares_wallet_address", "revenue_shares", ["wallet_address"])


def downgrade() -> None:
    op.drop_table("revenue_shares")
    op.drop_table("revenues")
    op.drop_table("voter_claims")
    op.drop_table("voter_reward_pools")
    op.drop_table("goods_revenue_distributions")
    op.drop_table("escrows")
    op.drop_table("orders")
    op.drop_table("goods")
    op.drop_table("votes")
    op.drop_table("memes")
    op.drop_table("archived_contests")
    op.drop_table("contests")
    op.drop_table("users")
