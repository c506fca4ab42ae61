# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for yamlconf tests.

Fixtures here are available to every test file automatically.
We keep them minimal, just the stuff that multiple test modules need.
"""

import textwrap
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture()
def write_yaml(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write dedented YAML text to a file in tmp_path and return its path."""

    def _write(content: str, filename: str = "config.yaml") -> Path:
        config_file = tmp_path / filename
        config_file.write_text(textwrap.dedent(content), encoding="utf-8")
        return config_file

    return _write


@pytest.fixture()
def server_config_file(write_yaml: Callable[[str, str], Path]) -> Path:
    """A server config that satisfies every declared constraint."""
    return write_yaml(
        """\
        name: "edge-proxy"
        hosts:
          - "10.0.0.1"
          - "10.0.0.2"
        timeout: 30
        debug: false
        """,
        "server.yaml",
    )


@pytest.fixture()
def blank_name_config_file(write_yaml: Callable[[str, str], Path]) -> Path:
    """Valid YAML, valid structure, but `name` is the empty string."""
    return write_yaml(
        """\
        name: ""
        hosts: ["10.0.0.1"]
        timeout: 30
        """,
        "blank_name.yaml",
    )


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
