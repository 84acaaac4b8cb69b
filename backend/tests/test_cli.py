"""Tests for startup option handling."""
from __future__ import annotations

import pytest

from rtc_gateway import cli
from rtc_gateway.config import Settings

REQUIRED = [
    "--listen=8080",
    "--appid=app1",
    "--access-key-id=test-id",
    "--access-key-secret=test-secret",
    "--gslb=https://rgslb.rtc.aliyuncs.com",
]


@pytest.fixture
def served(monkeypatch):
    calls: list[dict] = []

    def fake_run(app, **kwargs):
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(cli.uvicorn, "run", fake_run)
    return calls


@pytest.mark.parametrize("dropped", range(len(REQUIRED)))
def test_missing_required_option_exits_without_serving(served, capsys, dropped):
    argv = [arg for index, arg in enumerate(REQUIRED) if index != dropped]

    with pytest.raises(SystemExit) as exc:
        cli.main(argv)

    assert exc.value.code != 0
    assert served == []
    captured = capsys.readouterr()
    assert "usage:" in captured.out
    assert "missing required options" in captured.err


def test_environment_fills_missing_flags(served, monkeypatch):
    monkeypatch.setenv("RTC_GSLB", "https://gslb.example.com")

    cli.main(REQUIRED[:-1] + ["--listen=127.0.0.1:9000"])

    assert len(served) == 1
    assert served[0]["host"] == "127.0.0.1"
    assert served[0]["port"] == 9000
    assert served[0]["app"].state.settings.gslb == "https://gslb.example.com"


def test_invalid_listen_address_exits(served):
    with pytest.raises(SystemExit) as exc:
        cli.main(REQUIRED[1:] + ["--listen=not-a-port"])

    assert exc.value.code == 2
    assert served == []


@pytest.mark.parametrize(
    ("listen", "expected"),
    [("8080", ("0.0.0.0", 8080)), (":8080", ("0.0.0.0", 8080)), ("127.0.0.1:9000", ("127.0.0.1", 9000))],
)
def test_listen_address_forms(listen, expected):
    assert Settings(listen=listen).listen_address() == expected
