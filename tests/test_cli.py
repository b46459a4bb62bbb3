from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from loudspin import cli
from loudspin.core.errors import ConfigLoadError, LevelNotFoundError
from loudspin.core.model import ListRequest, MatchError, RunOutcome, SetLevelRequest, ShowRequest


class FakeService:
    requests: list = []

    def __init__(self) -> None:
        self.levels = [("loud", 254), ("medium", 192), ("quiet", 128)]

    def list_levels(self):
        return self.levels

    def run(self, request, *, on_match_error=None):
        FakeService.requests.append(request)
        if isinstance(request, ListRequest):
            return RunOutcome(request=request, levels=tuple(self.levels))
        if isinstance(request, SetLevelRequest) and request.name == "turbo":
            raise LevelNotFoundError("no such loudness level: turbo")
        on_match_error(MatchError(path=Path("/dev/disk"), error=PermissionError(13, "Permission denied")))
        return RunOutcome(request=request, devices=(Path("/dev/sda"),))


runner = CliRunner()


@pytest.fixture(autouse=True)
def fake_service(monkeypatch: pytest.MonkeyPatch):
    FakeService.requests = []
    monkeypatch.setattr(cli, "LoudspinService", FakeService)
    monkeypatch.setattr(cli, "configure_logging", lambda: None)
    return FakeService


def test_no_arguments_shows(fake_service) -> None:
    result = runner.invoke(cli.app, [])
    assert result.exit_code == 0
    assert fake_service.requests == [ShowRequest()]


def test_show_command(fake_service) -> None:
    result = runner.invoke(cli.app, ["show"])
    assert result.exit_code == 0
    assert fake_service.requests == [ShowRequest()]


def test_bare_level_sets_level(fake_service) -> None:
    result = runner.invoke(cli.app, ["quiet"])
    assert result.exit_code == 0
    assert fake_service.requests == [SetLevelRequest(name="quiet")]


def test_level_named_set_is_a_level(fake_service) -> None:
    result = runner.invoke(cli.app, ["set"])
    assert result.exit_code == 0
    assert fake_service.requests == [SetLevelRequest(name="set")]


def test_list_command(fake_service) -> None:
    result = runner.invoke(cli.app, ["list"])
    assert result.exit_code == 0
    assert result.stdout == "loud = 254\nmedium = 192\nquiet = 128\n"
    assert fake_service.requests == [ListRequest()]


def test_match_error_is_printed_and_run_continues() -> None:
    result = runner.invoke(cli.app, ["show"])
    assert result.exit_code == 0
    assert "failed to list file: /dev/disk: [Errno 13] Permission denied" in result.stderr


def test_unknown_level_error_is_clean() -> None:
    result = runner.invoke(cli.app, ["turbo"])
    assert result.exit_code == 1
    assert result.stderr == "no such loudness level: turbo\n"
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_error_chain_is_joined(monkeypatch: pytest.MonkeyPatch) -> None:
    class BrokenService:
        def __init__(self) -> None:
            try:
                raise FileNotFoundError(2, "No such file or directory")
            except FileNotFoundError as exc:
                raise ConfigLoadError("error opening the configuration file") from exc

    monkeypatch.setattr(cli, "LoudspinService", BrokenService)
    result = runner.invoke(cli.app, ["list"])
    assert result.exit_code == 1
    assert result.stderr == (
        "error opening the configuration file: [Errno 2] No such file or directory\n"
    )


def test_version_option() -> None:
    result = runner.invoke(cli.app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("loudspin ")
