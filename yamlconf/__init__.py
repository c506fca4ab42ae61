# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
yamlconf: typed YAML configuration with declared field constraints.

Subsystems:
  - config: loading pipeline and the error hierarchy
  - validation: constraint declarations and the validator
  - logging: structured JSON logging
  - cli: the `yamlconf` command
"""

from yamlconf.config.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigParseError,
    ConfigSchemaError,
    ConfigValidationError,
    EmptinessViolationError,
    PresenceViolationError,
    TypeMismatchViolationError,
)
from yamlconf.config.loader import build_config, load_config, load_config_from_stream
from yamlconf.validation.constraints import (
    NOT_BLANK,
    NOT_EMPTY,
    NOT_NULL,
    ConstraintKind,
    ConstraintMap,
    FieldRule,
    constrained,
    constraints_for,
    register,
    rule,
)
from yamlconf.validation.validator import check, validate
from yamlconf.validation.violations import ValidationResult, Violation, ViolationCategory

__version__ = "1.0.0"

__all__ = [
    "NOT_BLANK",
    "NOT_EMPTY",
    "NOT_NULL",
    "ConfigError",
    "ConfigLoadError",
    "ConfigParseError",
    "ConfigSchemaError",
    "ConfigValidationError",
    "ConstraintKind",
    "ConstraintMap",
    "EmptinessViolationError",
    "FieldRule",
    "PresenceViolationError",
    "TypeMismatchViolationError",
    "ValidationResult",
    "Violation",
    "ViolationCategory",
    "build_config",
    "check",
    "constrained",
    "constraints_for",
    "load_config",
    "load_config_from_stream",
    "register",
    "rule",
    "validate",
]
