# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the yamlconf CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. Diagnostics go through the structured logger; the only thing written
to stdout is the JSON document `describe` produces.
"""

import argparse
import importlib
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from yamlconf.cli.exit_codes import (
    CONFIG_ERROR,
    RUNTIME_ERROR,
    SCHEMA_ERROR,
    SUCCESS,
    USER_ERROR,
    VALIDATION_ERROR,
)
from yamlconf.config.exceptions import (
    ConfigError,
    ConfigSchemaError,
    ConfigValidationError,
)
from yamlconf.config.loader import load_config
from yamlconf.logging.logger import get_logger
from yamlconf.validation.constraints import constraints_for

# Library loggers that follow --log-level and --log-file.
_LIBRARY_LOGGERS = ("yamlconf.config.loader", "yamlconf.validation.validator")


def _setup_logger(args: argparse.Namespace, command_name: str) -> logging.Logger:
    log_file = Path(args.log_file) if args.log_file else None
    for name in _LIBRARY_LOGGERS:
        get_logger(name, log_level=args.log_level, log_file=log_file)
    return get_logger(f"yamlconf.cli.{command_name}", log_level=args.log_level, log_file=log_file)


def resolve_schema(reference: str) -> type:
    """
    Import the class named by a `module.path:ClassName` reference.

    Raises:
        ValueError: The reference is malformed, or doesn't name a class.
        ImportError: The module can't be imported.
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Schema reference must look like 'module.path:ClassName', got '{reference}'")

    target: object = importlib.import_module(module_name)
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as err:
            raise ValueError(f"'{attr_path}' not found in module '{module_name}'") from err

    if not isinstance(target, type):
        raise ValueError(f"'{reference}' is not a class")
    return target


def _resolve_or_log(
    reference: str,
    logger: logging.Logger,
    command_name: str,
) -> tuple[int, Optional[type]]:
    """
    Resolve the schema class for a command.

    Returns a tuple of (exit_code, schema). If exit_code is not SUCCESS, the
    caller should return it immediately.
    """
    try:
        return SUCCESS, resolve_schema(reference)
    except ConfigSchemaError as err:
        # Declarations are checked when the module defines the class.
        logger.error(
            "Schema class is broken",
            extra={"command": command_name, "schema": reference, "error": str(err)},
        )
        return SCHEMA_ERROR, None
    except (ValueError, ImportError) as err:
        logger.error(
            "Cannot resolve schema",
            extra={"command": command_name, "schema": reference, "error": str(err)},
        )
        return USER_ERROR, None


def handle_check(args: argparse.Namespace) -> int:
    """Load a config file into the schema class and run its field constraints."""
    logger = _setup_logger(args, "check")
    exit_code, schema = _resolve_or_log(args.schema, logger, "check")
    if exit_code != SUCCESS or schema is None:
        return exit_code

    logger.info(
        "Command started",
        extra={"command": "check", "config": args.config, "schema": args.schema},
    )

    try:
        load_config(Path(args.config), schema)
    except ConfigValidationError as err:
        logger.error(
            "Config is invalid",
            extra={
                "command": "check",
                "field": err.field_name,
                "owner": err.owner_name,
                "category": err.violation.category.value,
                "error": str(err),
            },
        )
        return VALIDATION_ERROR
    except ConfigSchemaError as err:
        logger.error(
            "Schema class is broken",
            extra={"command": "check", "schema": args.schema, "error": str(err)},
        )
        return SCHEMA_ERROR
    except ConfigError as err:
        logger.error(
            "Configuration error",
            extra={"command": "check", "error": str(err)},
        )
        return CONFIG_ERROR
    except Exception as err:
        logger.error(
            "Runtime error",
            extra={"command": "check", "error": str(err)},
            exc_info=True,
        )
        return RUNTIME_ERROR

    logger.info("Config is valid", extra={"command": "check", "config": args.config})
    return SUCCESS


def handle_describe(args: argparse.Namespace) -> int:
    """Print the constraint map declared on the schema class."""
    logger = _setup_logger(args, "describe")
    exit_code, schema = _resolve_or_log(args.schema, logger, "describe")
    if exit_code != SUCCESS or schema is None:
        return exit_code

    document = {
        "schema": f"{schema.__module__}.{schema.__qualname__}",
        "fields": constraints_for(schema).to_dict(),
    }
    sys.stdout.write(json.dumps(document, indent=2) + "\n")
    return SUCCESS
