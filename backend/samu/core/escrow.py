"""Escrow Rules — how much of a goods payment is held, and which transitions are legal.

Invariants:
    - Escrowed amount = floor(paid * (retail - base) / retail), clamped to [0, paid]
    - held -> released | refunded; settled escrows never transition again

Design Decisions:
    - Prices are USD floats from the catalog, payment is lamports: the profit
      ratio is computed in cents so the lamport math stays integral
"""

from samu.core.domain_types import EscrowStatus, Lamports

_SETTLED = (EscrowStatus.RELEASED, EscrowStatus.REFUNDED)


def profit_lamports(paid: Lamports, retail_price: float, base_price: float) -> Lamports:
    """Profit portion of a payment, proportional to the retail margin."""
    if paid <= 0 or retail_price <= 0:
        return Lamports(0)
    retail_cents = round(retail_price * 100)
    margin_cents = retail_cents - round(base_price * 100)
    if margin_cents <= 0:
        return Lamports(0)
    return Lamports(min(paid, paid * margin_cents // retail_cents))


def check_can_settle(status: str) -> str | None:
    """Return an error message when the escrow cannot be released or refunded."""
    if status in (s.value for s in _SETTLED):
        return f"Escrow already {status}"
    if status != EscrowStatus.HELD.value:
        return f"Unknown escrow status '{status}'"
    return None
