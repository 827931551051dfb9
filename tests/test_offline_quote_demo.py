from __future__ import annotations

import pytest


def test_offline_quote_demo_runs(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch) -> None:
    from tools.offline_quote_demo import main

    for key in ("ZAMM_DEFAULT_FEE_BPS", "ZAMM_DEFAULT_SLIPPAGE_BPS", "ZAMM_MAX_TOLERANCE_BPS"):
        monkeypatch.delenv(key, raising=False)

    assert main(["--tolerance", "1%"]) == 0
    out = capsys.readouterr().out
    assert "AAA -> BBB" in out
    assert "two_hop=True" in out
    assert "not provided for two-hop routes" in out
    assert out.rstrip().endswith("[offline-quote] OK")
