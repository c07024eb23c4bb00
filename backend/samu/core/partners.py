"""Partner registry — the meme-coin communities that run their own contests."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Partner:
    id: str
    name: str
    symbol: str
    description: str
    token_address: str
    color: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return asdict(self)


PARTNERS: dict[str, Partner] = {
    p.id: p for p in (
        Partner(
            "bonk", "Bonk", "BONK",
            "The dog coin of Solana with a fun community",
            "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263", "#FF6B35",
        ),
        Partner(
            "wif", "dogwifhat", "WIF",
            "Just a dog in a hat bringing joy to Solana",
            "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm", "#FFB800",
        ),
        Partner(
            "popcat", "POPCAT", "POPCAT",
            "The viral cat meme taking over Solana",
            "7GCihgDB8fe6KNjn2MYtkzZcRjQy3t9GHdC8uHYmW2hr", "#FF69B4",
        ),
        Partner(
            "book", "Book of Meme", "BOME",
            "Decentralized book storing the dankest memes",
            "ukHH6c7mMyiWCf1b9pnWe25TSpkDDt3H5pQZgZ74J82", "#00D4AA",
        ),
    )
}


def find_partner(partner_id: str) -> Partner | None:
    """Active partner by id (case-insensitive), else None."""
    partner = PARTNERS.get((partner_id or "").lower())
    if partner is None or not partner.is_active:
        return None
    return partner


def active_partners() -> list[Partner]:
    return [p for p in PARTNERS.values() if p.is_active]
