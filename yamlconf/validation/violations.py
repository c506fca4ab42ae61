# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Violation records and validation outcomes.

A Violation is plain data: which field, on which type, what went wrong.
The validator produces these as values; turning one into an exception is a
separate step so callers can choose between check() and validate().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from yamlconf.validation.kinds import ConstraintKind


class ViolationCategory(str, Enum):
    """What kind of problem a Violation describes."""

    PRESENCE = "presence"
    TYPE_MISMATCH = "type_mismatch"
    EMPTINESS = "emptiness"
    SCHEMA_DEFECT = "schema_defect"


@dataclass(frozen=True)
class Violation:
    """The first problem found on a config object."""

    field_name: str
    owner_name: str
    category: ViolationCategory
    message: str
    constraint: Optional[ConstraintKind] = None

    @property
    def is_schema_defect(self) -> bool:
        return self.category is ViolationCategory.SCHEMA_DEFECT


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of a single validation pass.

    Exactly one of the two states holds: `violation` is None and `value` is the
    validated object, or `violation` describes the first failure.
    """

    value: Any
    violation: Optional[Violation] = None

    @property
    def ok(self) -> bool:
        return self.violation is None
