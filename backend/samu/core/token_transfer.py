"""Token Transfer Verification — checks a jsonParsed Solana transaction for a SAMU vote payment.

Invariants:
    - Transaction must have succeeded (meta.err is null)
    - The voter wallet must be a signer
    - The voter's SAMU balance must drop, and the treasury's rise, by >= the voted amount
    - Amounts compared in raw base units (amount * 10**decimals), never floats

Design Decisions:
    - Balance deltas over instruction parsing: robust to transfer vs transferChecked,
      and to ATA-creation instructions bundled in the same transaction
"""

from collections import defaultdict


def _balances_by_owner(entries: list[dict] | None, mint: str) -> dict[str, int]:
    totals: dict[str, int] = defaultdict(int)
    for entry in entries or []:
        if entry.get("mint") != mint:
            continue
        owner = entry.get("owner")
        raw = (entry.get("uiTokenAmount") or {}).get("amount")
        if owner and raw is not None:
            totals[owner] += int(raw)
    return totals


def _signers(transaction: dict) -> set[str]:
    keys = ((transaction.get("transaction") or {}).get("message") or {}).get("accountKeys") or []
    signers = set()
    for key in keys:
        if isinstance(key, dict) and key.get("signer"):
            signers.add(key.get("pubkey"))
    return signers


def check_samu_transfer(
    transaction: dict | None,
    *,
    voter_wallet: str,
    treasury_wallet: str,
    mint: str,
    samu_amount: int,
    decimals: int,
) -> str | None:
    """Return None when the transaction pays the vote, else a human-readable reason."""
    if not transaction:
        return "transaction not found"
    meta = transaction.get("meta") or {}
    if meta.get("err") is not None:
        return "transaction failed on-chain"
    if voter_wallet not in _signers(transaction):
        return "voter wallet did not sign the transaction"

    required = samu_amount * 10 ** decimals
    pre = _balances_by_owner(meta.get("preTokenBalances"), mint)
    post = _balances_by_owner(meta.get("postTokenBalances"), mint)

    treasury_delta = post.get(treasury_wallet, 0) - pre.get(treasury_wallet, 0)
    voter_delta = pre.get(voter_wallet, 0) - post.get(voter_wallet, 0)

    if treasury_delta < required:
        return "treasury did not receive the voted SAMU amount"
    if voter_delta < required:
        return "voter balance did not decrease by the voted SAMU amount"
    return None


def extract_ui_balance(token_accounts: list[dict]) -> float:
    """UI amount of the first token account from getTokenAccountsByOwner (jsonParsed)."""
    if not token_accounts:
        return 0.0
    info = (
        ((token_accounts[0].get("account") or {}).get("data") or {})
        .get("parsed", {}).get("info", {})
    )
    return float((info.get("tokenAmount") or {}).get("uiAmount") or 0)
