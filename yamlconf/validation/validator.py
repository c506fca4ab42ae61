# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Field constraint validator.

Given a populated config object, walk the constraint map registered for its
class, read each constrained field and check it. The first problem found
stops the pass. There is no aggregated report and no recursion into nested
config objects; validate those separately if they carry their own map.

Reading a field goes through three steps, first match wins:
  1. the reader function declared with rule(..., reader=...)
  2. the attribute itself, for public field names
  3. an accessor method: is_<name>() for bool fields, get_<name>() otherwise

A missing accessor or a reader that blows up is a bug in the schema class,
not in the config data, so it comes back as a SCHEMA_DEFECT and is raised as
ConfigSchemaError rather than ConfigValidationError.

The object is only ever read.
"""

import logging
from collections.abc import Sequence, Set
from typing import Any, TypeVar

from yamlconf.config.exceptions import (
    ConfigError,
    ConfigSchemaError,
    EmptinessViolationError,
    PresenceViolationError,
    TypeMismatchViolationError,
)
from yamlconf.logging.logger import get_logger
from yamlconf.validation.constraints import FieldRule, constraints_for
from yamlconf.validation.kinds import NOT_BLANK, NOT_EMPTY, NOT_NULL, ConstraintKind
from yamlconf.validation.violations import ValidationResult, Violation, ViolationCategory

_logger: logging.Logger = get_logger(__name__)

T = TypeVar("T")

_ERRORS_BY_CATEGORY: dict[ViolationCategory, type[ConfigError]] = {
    ViolationCategory.PRESENCE: PresenceViolationError,
    ViolationCategory.TYPE_MISMATCH: TypeMismatchViolationError,
    ViolationCategory.EMPTINESS: EmptinessViolationError,
    ViolationCategory.SCHEMA_DEFECT: ConfigSchemaError,
}


class _FieldReadError(Exception):
    """Internal signal: the field could not be read. Carries the defect."""

    def __init__(self, violation: Violation) -> None:
        super().__init__(violation.message)
        self.violation = violation


def _violation(
    field_rule: FieldRule,
    owner: str,
    category: ViolationCategory,
    message: str,
    constraint: "ConstraintKind | None" = None,
) -> Violation:
    return Violation(
        field_name=field_rule.name,
        owner_name=owner,
        category=category,
        message=message,
        constraint=constraint,
    )


def accessor_name(field_rule: FieldRule) -> str:
    """is_<name> for bool fields, get_<name> for everything else."""
    bare = field_rule.name.lstrip("_")
    return f"is_{bare}" if field_rule.is_boolean else f"get_{bare}"


def _read_field(obj: Any, field_rule: FieldRule, owner: str) -> Any:
    if field_rule.reader is not None:
        try:
            return field_rule.reader(obj)
        except Exception as err:
            raise _FieldReadError(_violation(
                field_rule, owner, ViolationCategory.SCHEMA_DEFECT,
                f"Error calling reader for '{field_rule.name}' on object '{owner}': {err}",
            )) from err

    if not field_rule.name.startswith("_"):
        try:
            return getattr(obj, field_rule.name)
        except AttributeError:
            pass
        except Exception as err:
            raise _FieldReadError(_violation(
                field_rule, owner, ViolationCategory.SCHEMA_DEFECT,
                f"Error reading '{field_rule.name}' on object '{owner}': {err}",
            )) from err

    method_name = accessor_name(field_rule)
    method = getattr(obj, method_name, None)
    if method is None:
        raise _FieldReadError(_violation(
            field_rule, owner, ViolationCategory.SCHEMA_DEFECT,
            f"Field '{field_rule.name}' on '{owner}' does not have a {method_name}() method",
        ))
    if not callable(method):
        raise _FieldReadError(_violation(
            field_rule, owner, ViolationCategory.SCHEMA_DEFECT,
            f"Method '{method_name}' on '{owner}' is not callable",
        ))
    try:
        return method()
    except Exception as err:
        raise _FieldReadError(_violation(
            field_rule, owner, ViolationCategory.SCHEMA_DEFECT,
            f"Error calling '{method_name}' on object '{owner}': {err}",
        )) from err


def _is_collection(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray)):
        return False
    return isinstance(value, (Sequence, Set))


def _check_value(value: Any, kind: ConstraintKind, field_rule: FieldRule, owner: str) -> "Violation | None":
    name = field_rule.name
    if kind is NOT_NULL:
        if value is None:
            return _violation(
                field_rule, owner, ViolationCategory.PRESENCE,
                f"{name} in {owner} must not be undefined", NOT_NULL,
            )
        return None

    if kind is NOT_BLANK:
        if not isinstance(value, str):
            return _violation(
                field_rule, owner, ViolationCategory.TYPE_MISMATCH,
                f"{name} in {owner} is not a string as expected", NOT_BLANK,
            )
        if len(value) == 0:
            return _violation(
                field_rule, owner, ViolationCategory.EMPTINESS,
                f"{name} in {owner} must not be blank", NOT_BLANK,
            )
        return None

    if kind is NOT_EMPTY:
        if not _is_collection(value):
            return _violation(
                field_rule, owner, ViolationCategory.TYPE_MISMATCH,
                f"{name} in {owner} is not a collection as expected", NOT_EMPTY,
            )
        if len(value) == 0:
            return _violation(
                field_rule, owner, ViolationCategory.EMPTINESS,
                f"{name} in {owner} must not be empty", NOT_EMPTY,
            )
        return None

    raise ValueError(f"Unhandled constraint kind: {kind!r}")


def _check_field(obj: Any, field_rule: FieldRule, owner: str) -> "Violation | None":
    try:
        value = _read_field(obj, field_rule, owner)
    except _FieldReadError as err:
        return err.violation

    # Presence comes first in checks, so the stronger kinds never see None.
    for kind in field_rule.checks:
        violation = _check_value(value, kind, field_rule, owner)
        if violation is not None:
            return violation
    return None


def check(obj: T) -> ValidationResult:
    """
    Run every declared constraint on `obj` and return the outcome.

    Never raises for data problems or schema defects; those come back as the
    result's violation. Fields without declared constraints are not read.
    """
    owner = type(obj).__name__
    for field_rule in constraints_for(obj).rules:
        violation = _check_field(obj, field_rule, owner)
        if violation is not None:
            _logger.debug(
                "Constraint violated",
                extra={
                    "field": violation.field_name,
                    "owner": owner,
                    "category": violation.category.value,
                },
            )
            return ValidationResult(value=obj, violation=violation)
    return ValidationResult(value=obj)


def error_for(violation: Violation) -> ConfigError:
    """Build the exception matching a violation's category."""
    return _ERRORS_BY_CATEGORY[violation.category](violation)


def validate(obj: T) -> T:
    """
    Validate `obj` and return it unchanged.

    Raises:
        PresenceViolationError, TypeMismatchViolationError,
        EmptinessViolationError: the first data violation found.
        ConfigSchemaError: a constrained field could not be read at all.
    """
    result = check(obj)
    if result.violation is not None:
        raise error_for(result.violation)
    return obj
