# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

We keep these separate so that the CLI and callers can catch config-specific
failures without importing the loader or the validator.

The tree splits into three families:
  - ConfigLoadError: the document never became an object (I/O, YAML, structure)
  - ConfigValidationError: the object exists but its data breaks a constraint
  - ConfigSchemaError: the schema class itself is broken (developer bug)
"""

from typing import Optional

from yamlconf.validation.violations import Violation


class ConfigError(Exception):
    """Base for all configuration errors."""

    def __init__(self, message: str, *, source: Optional[str] = None) -> None:
        self.message = message
        self.source = source
        super().__init__(f"{message} (in {source})" if source else message)


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk."""


class ConfigParseError(ConfigLoadError):
    """
    Raised when the document is not valid YAML, or parses fine but cannot be
    mapped onto the target type.
    """


class _ViolationMixin:
    """Shared accessors for errors built from a Violation."""

    violation: Optional[Violation]

    @property
    def field_name(self) -> Optional[str]:
        return self.violation.field_name if self.violation is not None else None

    @property
    def owner_name(self) -> Optional[str]:
        return self.violation.owner_name if self.violation is not None else None

    def at(self, source: str) -> "ConfigError":
        """Return a copy of this error that names the document it came from."""
        if self.violation is not None:
            return type(self)(self.violation, source=source)  # type: ignore[call-arg]
        return type(self)(self.message, source=source)  # type: ignore[attr-defined,call-arg]


class ConfigValidationError(_ViolationMixin, ConfigError):
    """
    Raised when a config object was built but breaks one of its declared
    field constraints. Only the first violation found is reported.
    """

    def __init__(self, violation: Violation, *, source: Optional[str] = None) -> None:
        self.violation = violation
        super().__init__(violation.message, source=source)


class PresenceViolationError(ConfigValidationError):
    """A required field is undefined."""


class TypeMismatchViolationError(ConfigValidationError):
    """A text or collection constraint found a value of the wrong type."""


class EmptinessViolationError(ConfigValidationError):
    """A text field is blank or a collection field has no elements."""


class ConfigSchemaError(_ViolationMixin, ConfigError):
    """
    Raised when the schema definition itself is malformed (developer bug).

    This is either a bad constraint declaration, caught when the class is
    declared, or an accessor the validator cannot use, caught during
    validation. The latter carries the Violation that describes it.
    """

    def __init__(
        self,
        violation_or_message: "Violation | str",
        *,
        source: Optional[str] = None,
    ) -> None:
        if isinstance(violation_or_message, Violation):
            self.violation = violation_or_message
            message = violation_or_message.message
        else:
            self.violation = None
            message = violation_or_message
        super().__init__(message, source=source)
