# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Constraint declarations for config schema classes.

A schema author says which fields need which checks, right next to the class:

    @constrained(name=NOT_BLANK, hosts=NOT_EMPTY, timeout=NOT_NULL)
    class ServerConfig(BaseModel):
        name: Optional[str] = None
        hosts: list[str] = []
        timeout: Optional[int] = None

The decorator turns those keyword arguments into a ConstraintMap and stores it
on the class. The map is built once, when the class is declared, and never
changes afterwards. The validator only ever reads it.

Nothing in here evaluates a constraint. This module is metadata only.
"""

import dataclasses
import inspect
import types
import typing
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Callable, Optional, Union

from yamlconf.config.exceptions import ConfigSchemaError
from yamlconf.validation.kinds import (
    EVALUATION_ORDER,
    NOT_BLANK,
    NOT_EMPTY,
    NOT_NULL,
    ConstraintKind,
)

__all__ = [
    "NOT_BLANK",
    "NOT_EMPTY",
    "NOT_NULL",
    "ConstraintKind",
    "ConstraintMap",
    "ConstraintMapBuilder",
    "FieldRule",
    "constrained",
    "constraints_for",
    "register",
    "rule",
]

_CONSTRAINTS_ATTR = "__field_constraints__"

Reader = Callable[[Any], Any]


@dataclasses.dataclass(frozen=True)
class FieldRule:
    """
    Everything the validator needs to know about one constrained field.

    `declared_type` is whatever the class annotates the field with, or None
    when it has no annotation. It only matters for picking the is_/get_
    accessor name. `reader` is an optional function taking the config object
    and returning the field's value.
    """

    name: str
    kinds: frozenset[ConstraintKind]
    declared_type: Any = None
    reader: Optional[Reader] = None

    @property
    def checks(self) -> tuple[ConstraintKind, ...]:
        """Kinds to evaluate, in precedence order, with presence implied."""
        return tuple(kind for kind in EVALUATION_ORDER if kind in self.kinds or kind is NOT_NULL)

    @property
    def is_boolean(self) -> bool:
        return _is_boolean_type(self.declared_type)

    def merged_with(self, other: "FieldRule") -> "FieldRule":
        """Combine two declarations for the same field. Kinds are unioned."""
        return dataclasses.replace(
            self,
            kinds=self.kinds | other.kinds,
            reader=other.reader if other.reader is not None else self.reader,
            declared_type=other.declared_type if other.declared_type is not None else self.declared_type,
        )


def _is_boolean_type(declared: Any) -> bool:
    if declared is bool:
        return True
    if isinstance(declared, str):
        compact = declared.replace(" ", "").replace("typing.", "")
        return compact in {"bool", "Optional[bool]", "bool|None", "None|bool"}
    if typing.get_origin(declared) in (Union, types.UnionType):
        return set(typing.get_args(declared)) - {type(None)} == {bool}
    return False


class ConstraintMap(Mapping[str, FieldRule]):
    """
    Ordered, read-only mapping of field name to FieldRule.

    Iteration order is the order the validator walks fields in.
    """

    def __init__(self, rules: Iterable[FieldRule] = ()) -> None:
        self._rules: dict[str, FieldRule] = {}
        for field_rule in rules:
            existing = self._rules.get(field_rule.name)
            self._rules[field_rule.name] = (
                existing.merged_with(field_rule) if existing is not None else field_rule
            )

    def __getitem__(self, name: str) -> FieldRule:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"ConstraintMap({list(self._rules.values())!r})"

    @property
    def rules(self) -> tuple[FieldRule, ...]:
        return tuple(self._rules.values())

    def to_dict(self) -> dict[str, list[str]]:
        """Plain, JSON-friendly view: field name -> kind values in check order."""
        return {
            name: [kind.value for kind in EVALUATION_ORDER if kind in field_rule.kinds]
            for name, field_rule in self._rules.items()
        }

    @staticmethod
    def builder() -> "ConstraintMapBuilder":
        return ConstraintMapBuilder()


EMPTY_CONSTRAINTS = ConstraintMap()


class ConstraintMapBuilder:
    """Imperative alternative to @constrained, for classes you cannot decorate."""

    def __init__(self) -> None:
        self._rules: list[FieldRule] = []

    def field(
        self,
        name: str,
        *kinds: "ConstraintKind | str",
        reader: Optional[Reader] = None,
    ) -> "ConstraintMapBuilder":
        self._rules.append(_make_rule(name, kinds, reader))
        return self

    def build(self) -> ConstraintMap:
        return ConstraintMap(self._rules)


def rule(*kinds: "ConstraintKind | str", reader: Optional[Reader] = None) -> FieldRule:
    """
    Declare a field's kinds together with a reader function.

    Used as a @constrained value when the field should be read through a
    function instead of by attribute:

        @constrained(enabled=rule(NOT_NULL, reader=lambda c: c.enabled_flag()))
    """
    # The name is filled in by @constrained from the keyword it is passed under.
    return _make_rule("_", kinds, reader)


def _coerce_kind(kind: Any, field_name: str) -> ConstraintKind:
    if isinstance(kind, ConstraintKind):
        return kind
    try:
        return ConstraintKind(kind)
    except ValueError as err:
        raise ConfigSchemaError(
            f"Unknown constraint {kind!r} declared on field '{field_name}'. "
            f"Must be one of: {', '.join(k.value for k in ConstraintKind)}"
        ) from err


def _make_rule(name: Any, kinds: Iterable[Any], reader: Optional[Reader]) -> FieldRule:
    if not isinstance(name, str) or not name.isidentifier():
        raise ConfigSchemaError(f"Constraint declared on invalid field name {name!r}")
    coerced = frozenset(_coerce_kind(kind, name) for kind in kinds)
    if not coerced:
        raise ConfigSchemaError(f"Field '{name}' is declared with no constraints")
    if reader is not None and not callable(reader):
        raise ConfigSchemaError(f"Reader declared for field '{name}' is not callable")
    return FieldRule(name=name, kinds=coerced, reader=reader)


def _rule_from_declaration(name: str, declaration: Any) -> FieldRule:
    """Accept a kind, an iterable of kinds, or a FieldRule from rule()."""
    if isinstance(declaration, FieldRule):
        return _make_rule(name, declaration.kinds, declaration.reader)
    if isinstance(declaration, (ConstraintKind, str)):
        return _make_rule(name, (declaration,), None)
    if isinstance(declaration, Iterable):
        return _make_rule(name, tuple(declaration), None)
    raise ConfigSchemaError(
        f"Field '{name}' has an invalid constraint declaration: {declaration!r}"
    )


def _declaration_order(cls: type) -> list[str]:
    """Field names in the order the class declares them."""
    model_fields = getattr(cls, "model_fields", None)
    if isinstance(model_fields, dict):
        return list(model_fields)
    if dataclasses.is_dataclass(cls):
        return [f.name for f in dataclasses.fields(cls)]
    names: list[str] = []
    for klass in reversed(cls.__mro__):
        for name in inspect.get_annotations(klass):
            if name not in names:
                names.append(name)
    return names


def _declared_types(cls: type) -> dict[str, Any]:
    declared: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        declared.update(inspect.get_annotations(klass))
    try:
        declared.update(typing.get_type_hints(cls))
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references keep their raw string annotations.
        pass
    model_fields = getattr(cls, "model_fields", None)
    if isinstance(model_fields, dict):
        declared.update({name: info.annotation for name, info in model_fields.items()})
    return declared


def _bind(cls: type, rules: Iterable[FieldRule]) -> ConstraintMap:
    """Order rules by the class's field order and attach declared types."""
    declared = _declared_types(cls)
    inherited = constraints_for(cls)
    combined = ConstraintMap([*inherited.rules, *rules])

    order = _declaration_order(cls)
    position = {name: index for index, name in enumerate(order)}
    names = list(combined)
    ordered_names = sorted(
        names,
        key=lambda name: (
            (0, position[name]) if name in position else (1, names.index(name))
        ),
    )
    return ConstraintMap(
        dataclasses.replace(combined[name], declared_type=declared.get(name)) for name in ordered_names
    )


def register(cls: type, cmap: ConstraintMap) -> type:
    """Attach a constraint map to `cls`, on top of anything inherited."""
    if not isinstance(cls, type):
        raise ConfigSchemaError(f"Constraints can only be registered on classes, got {cls!r}")
    setattr(cls, _CONSTRAINTS_ATTR, _bind(cls, cmap.rules))
    return cls


def constrained(**declarations: Any) -> Callable[[type], type]:
    """
    Class decorator declaring field constraints.

    Each keyword is a field name. Each value is a ConstraintKind, an iterable
    of kinds, or a FieldRule from rule(). Declaring the same kind twice, or
    declaring NOT_NULL next to a kind that implies it, is harmless.
    """
    rules = [_rule_from_declaration(name, value) for name, value in declarations.items()]

    def decorate(cls: type) -> type:
        return register(cls, ConstraintMap(rules))

    return decorate


def constraints_for(target: Any) -> ConstraintMap:
    """Return the constraint map of a class or of an instance's class."""
    cls = target if isinstance(target, type) else type(target)
    cmap = getattr(cls, _CONSTRAINTS_ATTR, None)
    return cmap if isinstance(cmap, ConstraintMap) else EMPTY_CONSTRAINTS
