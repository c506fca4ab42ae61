# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI smoke tests.

We use subprocess to run the actual CLI entrypoint the way a user would.
This catches issues that unit tests miss, like broken imports or entrypoint
registration. Each test writes a small schema module next to its config file
and runs the command from that directory.
"""

import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from yamlconf.cli.exit_codes import (
    CONFIG_ERROR,
    SCHEMA_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
)

_PROJECT_ROOT = Path(__file__).resolve().parents[2]

_SCHEMA_MODULE = textwrap.dedent("""\
    from typing import Optional

    from pydantic import BaseModel

    from yamlconf import NOT_BLANK, NOT_EMPTY, NOT_NULL, constrained


    @constrained(name=NOT_BLANK, hosts=NOT_EMPTY, timeout=NOT_NULL)
    class ServerConfig(BaseModel):
        name: Optional[str] = None
        hosts: list[str] = []
        timeout: Optional[int] = None


    @constrained(_token=NOT_BLANK)
    class TokenConfig(BaseModel):
        pass
""")


def _run_cli(cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
    """Run `yamlconf` with the given arguments and capture output."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        p for p in (str(cwd), str(_PROJECT_ROOT), env.get("PYTHONPATH", "")) if p
    )
    return subprocess.run(
        [sys.executable, "-m", "yamlconf.cli.main", *args],
        capture_output=True,
        text=True,
        timeout=30,
        cwd=cwd,
        env=env,
    )


@pytest.fixture()
def workdir(tmp_path: Path) -> Path:
    (tmp_path / "cli_schemas.py").write_text(_SCHEMA_MODULE, encoding="utf-8")
    return tmp_path


def _log_lines(stderr: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in stderr.splitlines() if line.startswith("{")]


class TestHelpTexts:
    @pytest.mark.parametrize("subcommand", ["check", "describe"])
    def test_subcommand_help_exits_zero(self, tmp_path: Path, subcommand: str) -> None:
        result = _run_cli(tmp_path, subcommand, "--help")
        assert result.returncode == SUCCESS
        assert "usage" in result.stdout.lower()

    def test_root_without_subcommand_exits_with_user_error(self, tmp_path: Path) -> None:
        result = _run_cli(tmp_path)
        assert result.returncode == USER_ERROR


class TestCheck:
    def test_valid_config_exits_zero(self, workdir: Path) -> None:
        (workdir / "app.yaml").write_text(
            'name: "svc"\nhosts: ["10.0.0.1"]\ntimeout: 5\n', encoding="utf-8"
        )
        result = _run_cli(workdir, "check", "--config", "app.yaml", "--schema", "cli_schemas:ServerConfig")
        assert result.returncode == SUCCESS, result.stderr
        assert any(entry["msg"] == "Config is valid" for entry in _log_lines(result.stderr))

    def test_violation_exits_with_validation_error(self, workdir: Path) -> None:
        (workdir / "app.yaml").write_text(
            'name: "svc"\nhosts: []\ntimeout: 5\n', encoding="utf-8"
        )
        result = _run_cli(workdir, "check", "--config", "app.yaml", "--schema", "cli_schemas:ServerConfig")
        assert result.returncode == VALIDATION_ERROR
        errors = [entry for entry in _log_lines(result.stderr) if entry["level"] == "ERROR"]
        assert errors[0]["field"] == "hosts"
        assert errors[0]["category"] == "emptiness"

    def test_log_file_receives_library_records(self, workdir: Path) -> None:
        (workdir / "app.yaml").write_text(
            'name: "svc"\nhosts: []\ntimeout: 5\n', encoding="utf-8"
        )
        result = _run_cli(
            workdir, "check", "--config", "app.yaml", "--schema", "cli_schemas:ServerConfig",
            "--log-level", "DEBUG", "--log-file", "logs/run.log",
        )
        assert result.returncode == VALIDATION_ERROR
        entries = _log_lines((workdir / "logs" / "run.log").read_text(encoding="utf-8"))
        modules = {entry["module"] for entry in entries}
        assert "yamlconf.validation.validator" in modules
        assert "yamlconf.cli.check" in modules

    def test_missing_file_exits_with_config_error(self, workdir: Path) -> None:
        result = _run_cli(workdir, "check", "--config", "nope.yaml", "--schema", "cli_schemas:ServerConfig")
        assert result.returncode == CONFIG_ERROR
        assert "nope.yaml" in result.stderr

    def test_broken_schema_exits_with_schema_error(self, workdir: Path) -> None:
        (workdir / "token.yaml").write_text("{}\n", encoding="utf-8")
        result = _run_cli(workdir, "check", "--config", "token.yaml", "--schema", "cli_schemas:TokenConfig")
        assert result.returncode == SCHEMA_ERROR

    @pytest.mark.parametrize(
        "reference",
        ["cli_schemas", "cli_schemas:Missing", "no_such_module:Thing"],
    )
    def test_bad_schema_reference_exits_with_user_error(self, workdir: Path, reference: str) -> None:
        (workdir / "app.yaml").write_text("name: x\n", encoding="utf-8")
        result = _run_cli(workdir, "check", "--config", "app.yaml", "--schema", reference)
        assert result.returncode == USER_ERROR


class TestDescribe:
    def test_prints_constraint_map_as_json(self, workdir: Path) -> None:
        result = _run_cli(workdir, "describe", "--schema", "cli_schemas:ServerConfig")
        assert result.returncode == SUCCESS, result.stderr
        document = json.loads(result.stdout)
        assert document["schema"] == "cli_schemas.ServerConfig"
        assert document["fields"] == {
            "name": ["not_blank"],
            "hosts": ["not_empty"],
            "timeout": ["not_null"],
        }
