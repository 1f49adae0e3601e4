from __future__ import annotations

import pytest

from bwload import cli


@pytest.mark.parametrize(
    "argv",
    [
        ["-c", "0"],
        ["-n", "0"],
        ["-z", "0"],
        ["-c", "many"],
        ["-d", "-3"],
        ["-d", "nan"],
        ["--timeout", "inf"],
        ["-s", "http://[::1", "-n", "1"],
    ],
)
def test_configuration_errors_exit_before_any_request(
    argv: list[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    async def fail_health(config: object) -> bool:
        raise AssertionError("no request may be issued")

    monkeypatch.setattr(cli, "_server_healthy", fail_health)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    assert excinfo.value.code == 1


def test_unhealthy_server_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    async def unhealthy(config: object) -> bool:
        return False

    async def no_run(*args: object, **kwargs: object) -> None:
        raise AssertionError("load must not start")

    monkeypatch.setattr(cli, "_server_healthy", unhealthy)
    monkeypatch.setattr(cli, "run_load_test", no_run)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["-n", "5"])
    assert excinfo.value.code == 1


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, "0"), (1023, "1023"), (2048, "2.0K"), (5 * 1024 * 1024, "5.0M")],
)
def test_format_bytes(value: float, expected: str) -> None:
    assert cli._format_bytes(value) == expected
