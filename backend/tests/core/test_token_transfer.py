"""SAMU vote payment verification over jsonParsed transactions."""

from samu.core.token_transfer import check_samu_transfer, extract_ui_balance

MINT = "SamuMint1111111111111111111111111111111111"
VOTER = "Voter11111111111111111111111111111111111111"
TREASURY = "Treasury111111111111111111111111111111111"


def _balance(owner, amount):
    return {"mint": MINT, "owner": owner, "uiTokenAmount": {"amount": str(amount)}}


def _tx(*, voter_pre, voter_post, treasury_pre, treasury_post, err=None, signer=VOTER):
    return {
        "meta": {
            "err": err,
            "preTokenBalances": [_balance(VOTER, voter_pre), _balance(TREASURY, treasury_pre)],
            "postTokenBalances": [
                _balance(VOTER, voter_post), _balance(TREASURY, treasury_post),
            ],
        },
        "transaction": {"message": {"accountKeys": [
            {"pubkey": signer, "signer": True},
            {"pubkey": TREASURY, "signer": False},
        ]}},
    }


def _check(tx, amount=5):
    return check_samu_transfer(
        tx, voter_wallet=VOTER, treasury_wallet=TREASURY,
        mint=MINT, samu_amount=amount, decimals=2,
    )


def test_valid_transfer_passes():
    tx = _tx(voter_pre=1_000, voter_post=500, treasury_pre=0, treasury_post=500)
    assert _check(tx) is None


def test_missing_transaction():
    assert _check(None) == "transaction not found"


def test_failed_transaction():
    tx = _tx(voter_pre=1_000, voter_post=500, treasury_pre=0, treasury_post=500,
             err={"InstructionError": [0, "Custom"]})
    assert _check(tx) == "transaction failed on-chain"


def test_voter_must_sign():
    tx = _tx(voter_pre=1_000, voter_post=500, treasury_pre=0, treasury_post=500,
             signer="Someone")
    assert "sign" in _check(tx)


def test_treasury_underpaid():
    tx = _tx(voter_pre=1_000, voter_post=500, treasury_pre=0, treasury_post=499)
    assert "treasury" in _check(tx)


def test_other_mint_ignored():
    tx = _tx(voter_pre=1_000, voter_post=500, treasury_pre=0, treasury_post=500)
    for entry in tx["meta"]["postTokenBalances"]:
        entry["mint"] = "OtherMint"
    assert _check(tx) is not None


def test_extract_ui_balance():
    accounts = [{"account": {"data": {"parsed": {"info": {
        "tokenAmount": {"uiAmount": 1234.5},
    }}}}}]
    assert extract_ui_balance(accounts) == 1234.5
    assert extract_ui_balance([]) == 0.0
