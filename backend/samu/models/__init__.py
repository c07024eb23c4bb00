"""ORM Models — SQLAlchemy declarative models for all domain entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Amounts in SOL stored as BIGINT lamports; SAMU as BIGINT whole tokens

Design Decisions:
    - One file per aggregate for locality
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from samu.models.user import User  # noqa: F401
from samu.models.contest import Contest, ArchivedContest  # noqa: F401
from samu.models.meme import Meme  # noqa: F401
from samu.models.vote import Vote  # noqa: F401
from samu.models.goods import Goods  # noqa: F401
from samu.models.order import Order  # noqa: F401
from samu.models.escrow import Escrow  # noqa: F401
from samu.models.goods_revenue import GoodsRevenueDistribution  # noqa: F401
from samu.models.reward_pool import VoterRewardPool, VoterClaim  # noqa: F401
from samu.models.revenue import Revenue, RevenueShare  # noqa: F401
from samu.models.nft import Nft, NftComment  # noqa: F401
from samu.models.partner import PartnerMeme, PartnerVote  # noqa: F401
