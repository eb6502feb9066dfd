"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from issuedeck import cli
from issuedeck.core.config import BootstrapParams, load_bootstrap_params
from issuedeck.core.models import Label
from issuedeck.storage import Cache, DiskStorage


@pytest.fixture(autouse=True)
def clear_params_cache() -> None:
    load_bootstrap_params.cache_clear()


def _params(tmp_path: Path) -> BootstrapParams:
    return BootstrapParams(
        config_file=tmp_path / "config.json",
        cache_file=tmp_path / "cache.json",
        state_file=tmp_path / "state.json",
    )


def test_parser_defaults() -> None:
    args = cli.build_parser().parse_args(["metadata", "types", "--refresh"])

    assert args.command == "metadata"
    assert args.kind == "types"
    assert args.refresh is True
    assert args.clear_cache is None


def test_info_prints_paths(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    args = cli.build_parser().parse_args(["info"])

    cli.execute(args, _params(tmp_path))

    output = capsys.readouterr().out
    assert str(tmp_path / "cache.json") in output
    assert str(tmp_path / "state.json") in output


def test_cache_clear_reports_count(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    Cache(DiskStorage(tmp_path / "cache.json"), "cache").set("types", [], 60)
    args = cli.build_parser().parse_args(["cache-clear"])

    cli.execute(args, _params(tmp_path))

    assert "Removed 1 cached entry." in capsys.readouterr().out


def test_reports_save_and_list(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    args = cli.build_parser().parse_args(["reports", "--save", "bugs", "type = Bug"])

    cli.execute(args, _params(tmp_path))

    output = capsys.readouterr().out
    assert "Saved report 'bugs'." in output
    assert "type = Bug" in output


def test_missing_tracker_config_exits(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("ISSUEDECK_CONFIG_FILE", str(tmp_path / "absent.json"))
    monkeypatch.setenv("ISSUEDECK_CACHE_FILE", str(tmp_path / "cache.json"))
    monkeypatch.setenv("ISSUEDECK_STATE_FILE", str(tmp_path / "state.json"))

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["issue", "ABC-1"])

    assert excinfo.value.code == 1
    assert "does not exist" in capsys.readouterr().out


class StubMetadata:
    """Metadata stub recording the refresh flag it was called with."""

    def __init__(self) -> None:
        self.refreshed: list[bool] = []

    def get_labels(self, invalidate: bool = False) -> list[Label]:
        self.refreshed.append(invalidate)
        return [Label(name="backend"), Label(name="ui")]

    def get_transitions(self, num: str, invalidate: bool = False) -> list[dict[str, Any]]:
        self.refreshed.append(invalidate)
        return [{"id": "21", "name": "Finish", "to": {"name": "Done"}}]


def test_metadata_lists_labels(capsys: pytest.CaptureFixture[str]) -> None:
    args = cli.build_parser().parse_args(["metadata", "labels", "--refresh"])
    metadata = StubMetadata()

    cli._run_metadata(SimpleNamespace(metadata=metadata), args.kind, refresh=args.refresh)

    assert capsys.readouterr().out.splitlines() == ["backend", "ui"]
    assert metadata.refreshed == [True]


def test_transitions_lists_targets(capsys: pytest.CaptureFixture[str]) -> None:
    args = cli.build_parser().parse_args(["transitions", "ABC-1"])
    metadata = StubMetadata()

    cli._run_transitions(SimpleNamespace(metadata=metadata), args.key, refresh=args.refresh)

    assert "Finish -> Done" in capsys.readouterr().out
    assert metadata.refreshed == [False]
