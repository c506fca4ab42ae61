# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""The closed set of per-field constraint kinds."""

from enum import Enum


class ConstraintKind(str, Enum):
    """
    One rule a schema author can attach to a field.

    NON_BLANK_TEXT and NON_EMPTY_COLLECTION both imply PRESENCE. The validator
    checks presence first and reports that failure instead of the stronger one.
    Member order is the evaluation order.
    """

    REQUIRED_PRESENCE = "not_null"
    REQUIRED_NON_BLANK_TEXT = "not_blank"
    REQUIRED_NON_EMPTY_COLLECTION = "not_empty"


NOT_NULL = ConstraintKind.REQUIRED_PRESENCE
NOT_BLANK = ConstraintKind.REQUIRED_NON_BLANK_TEXT
NOT_EMPTY = ConstraintKind.REQUIRED_NON_EMPTY_COLLECTION

# Evaluation precedence, fixed regardless of declaration order.
EVALUATION_ORDER: tuple[ConstraintKind, ...] = (NOT_NULL, NOT_BLANK, NOT_EMPTY)
