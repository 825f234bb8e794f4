"""Tests for the careerclips command line entrypoint."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
import respx
import yaml

from careerclips.interfaces.cli import cli


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.dump(
            {
                "environment": "test",
                "storage": {"backend": "diskcache", "dir": str(tmp_path / "store")},
            }
        ),
        encoding="utf-8",
    )
    return path


class TestParseArgs:
    def test_bare_invocation_serves(self) -> None:
        args = cli._parse_args([])
        assert args.command == "serve"
        assert args.host is None

    def test_validate_takes_clip_id(self) -> None:
        args = cli._parse_args(["validate", "abc", "--log-level", "DEBUG"])
        assert args.command == "validate"
        assert args.clip_id == "abc"
        assert args.log_level == "DEBUG"

    def test_common_flags_on_every_command(self) -> None:
        for command in ("serve", "validate-pending", "seed"):
            args = cli._parse_args([command, "--config", "x.yaml", "--log-format", "json"])
            assert args.config == "x.yaml"
            assert args.log_format == "json"


class TestStart:
    def test_serve_runs_uvicorn(self, config_file: Path) -> None:
        with patch.object(cli.uvicorn, "run") as run:
            rc = cli.start(["serve", "--config", str(config_file), "--port", "8123"])
        assert rc == 0
        assert run.call_args.kwargs["port"] == 8123

    def test_seed_then_validate_pending(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with respx.mock(assert_all_called=False) as router:
            router.head(url__startswith="https://www.youtube.com/").mock(
                return_value=httpx.Response(200, headers={"content-type": "text/html"})
            )
            assert cli.start(["seed", "--config", str(config_file)]) == 0
            seeded = json.loads(capsys.readouterr().out)

            assert cli.start(["validate-pending", "--config", str(config_file)]) == 0
            pending = json.loads(capsys.readouterr().out)

        assert seeded == {"created": 12, "validated": 12}
        assert pending == {"validated": 0, "valid": 0, "invalid": 0}

    def test_validate_unknown_clip_exit_code(
        self, config_file: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        rc = cli.start(["validate", "missing", "--config", str(config_file)])
        assert rc == 1
        out = json.loads(capsys.readouterr().out)
        assert out == {"success": False, "is_valid": False, "reason": "Clip not found"}
