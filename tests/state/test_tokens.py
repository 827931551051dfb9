from __future__ import annotations

import pytest

from zamm_pricing.state.tokens import COINS_ADDRESS, HUB_TOKEN, UINT256_MAX, ZERO_ADDRESS, Token, require_uint256


def test_hub_token_identity() -> None:
    assert HUB_TOKEN.is_hub is True
    assert Token(id=0).is_hub is False  # id 0 in the Coins contract is not the hub
    assert Token(id=0, address=ZERO_ADDRESS).same_asset(HUB_TOKEN)


def test_sort_key_puts_hub_first() -> None:
    tokens = [Token(id=3), HUB_TOKEN, Token(id=1)]
    ordered = sorted(tokens, key=Token.sort_key)
    assert ordered[0] is HUB_TOKEN
    assert [t.id for t in ordered[1:]] == [1, 3]


def test_token_validation() -> None:
    with pytest.raises(ValueError):
        Token(id=1, address="0xnot-an-address")
    with pytest.raises(ValueError):
        Token(id=-1)
    with pytest.raises(ValueError):
        Token(id=1, fee_bps=10_000)
    assert Token(id=1, address=COINS_ADDRESS.lower()).address == COINS_ADDRESS


def test_require_uint256_bounds() -> None:
    assert require_uint256("x", UINT256_MAX) == UINT256_MAX
    with pytest.raises(ValueError):
        require_uint256("x", UINT256_MAX + 1)
    with pytest.raises(TypeError):
        require_uint256("x", False)
    with pytest.raises(TypeError):
        require_uint256("x", 1.0)  # type: ignore[arg-type]
