from samu.core.partners import PARTNERS, active_partners, find_partner


def test_find_partner_case_insensitive():
    assert find_partner("BONK").symbol == "BONK"
    assert find_partner("shib") is None
    assert find_partner("") is None


def test_active_partners_keep_registry_order():
    assert [p.id for p in active_partners()] == list(PARTNERS)
    assert active_partners()[0].to_dict()["token_address"].startswith("DezX")
