# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: reads YAML and produces a validated config object of the
caller's type.

The loading pipeline is deliberately simple and linear:
  1. Read raw text from the file (or stream)
  2. Parse as YAML into a plain dict
  3. Build the target type from the dict
  4. Check the declared field constraints
  5. Return the object

If anything goes wrong at any step, we fail immediately with exactly one
ConfigError. There is no retry logic and no partial result.

Step 3 depends on what the target type is:
  - pydantic model: `model_validate(data)`, so pydantic's own typing applies
  - dataclass or plain class: `target_type(**data)`
"""

import logging
from pathlib import Path
from typing import IO, Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from yamlconf.config.exceptions import (
    ConfigLoadError,
    ConfigParseError,
    ConfigSchemaError,
    ConfigValidationError,
)
from yamlconf.logging.logger import get_logger
from yamlconf.validation.validator import validate

_logger: logging.Logger = get_logger(__name__)

C = TypeVar("C")


def _read_config_text(config_path: Path) -> str:
    """
    Read a config file as UTF-8 text.

    We explicitly check for file existence before reading, because the
    OSError message alone does not say which of our inputs was wrong.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't a file, or can't be read.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        return config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err


def parse_document(text: Union[str, bytes], source: str) -> dict[str, Any]:
    """
    Parse YAML text into the mapping at the document root.

    An empty document becomes an empty mapping, so a type whose fields all have
    defaults can still be built and then validated.

    Raises:
        ConfigParseError: Invalid YAML, or a root that isn't a mapping.
    """
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as err:
        raise ConfigParseError(f"Invalid YAML in {source}: {err}") from err

    if parsed is None:
        return {}

    if not isinstance(parsed, dict):
        raise ConfigParseError(
            f"Config document {source} must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def build_config(data: dict[str, Any], target_type: type[C], source: str = "<data>") -> C:
    """
    Map a parsed document onto `target_type`. No constraint checks happen here.

    Raises:
        ConfigParseError: The mapping doesn't fit the type (unknown keys,
            missing constructor arguments, pydantic type errors), or the
            type's own construction code raised.
    """
    if not isinstance(target_type, type):
        raise ConfigSchemaError(f"Config target must be a class, got {target_type!r}")

    if issubclass(target_type, BaseModel):
        try:
            return target_type.model_validate(data)
        except ValidationError as err:
            raise ConfigParseError(
                f"Config {source} does not match {target_type.__name__}:\n{err}"
            ) from err
        except Exception as err:
            raise ConfigParseError(
                f"Config {source} could not be built as {target_type.__name__}: {err!r}"
            ) from err

    try:
        return target_type(**data)
    except (TypeError, ValueError) as err:
        raise ConfigParseError(
            f"Config {source} does not match {target_type.__name__}: {err}"
        ) from err
    except Exception as err:
        raise ConfigParseError(
            f"Config {source} could not be built as {target_type.__name__}: {err!r}"
        ) from err


def _validate_from(config: C, source: str) -> C:
    try:
        return validate(config)
    except (ConfigValidationError, ConfigSchemaError) as err:
        raise err.at(source) from err


def load_config_from_stream(
    stream: IO[Any],
    target_type: type[C],
    source: Optional[str] = None,
) -> C:
    """
    Same pipeline as load_config, for an already-open text or binary stream.

    `source` names the stream in error messages; defaults to the stream's
    `name` attribute, or "<stream>".
    """
    source = source or str(getattr(stream, "name", "<stream>"))
    try:
        text = stream.read()
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigLoadError(f"Cannot read config stream {source}: {err}") from err

    data = parse_document(text, source)
    config = build_config(data, target_type, source)
    config = _validate_from(config, source)

    _logger.debug(
        "Loaded config",
        extra={"path": source, "type": target_type.__name__},
    )
    return config


def load_config(config_path: Union[Path, str], target_type: type[C]) -> C:
    """
    Load, build and validate a config file into a `target_type` instance.

    This is the single entry point for config loading. After it returns, the
    config is guaranteed to be:
      - structurally valid for `target_type`
      - compliant with every constraint declared on `target_type`

    Args:
        config_path: Path to a YAML config file.
        target_type: The config class to build.

    Returns:
        A fully validated `target_type` instance.

    Raises:
        ConfigLoadError: File I/O failures.
        ConfigParseError: YAML parse or structure failures.
        ConfigValidationError: The first violated field constraint.
        ConfigSchemaError: `target_type` declares a field it cannot read.
    """
    config_path = Path(config_path)
    source = str(config_path)

    text = _read_config_text(config_path)
    data = parse_document(text, source)
    config = build_config(data, target_type, source)
    config = _validate_from(config, source)

    _logger.debug(
        "Loaded config",
        extra={"path": source, "type": target_type.__name__},
    )
    return config
