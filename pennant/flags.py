r"""
Pennant flag declarations.

Overview
- Kind
  • PRESENCE: no value; matched means true.
  • BOOL: optional value token coerced to true/false (permissive, defaults to true).
  • INT: required value token parsed as a base-10 signed integer.
  • STR: required value token stored verbatim.

- Resolved values (one variant per kind, immutable)
  • Presence(), Boolean(value), Integer(value), String(value).
  A flag's value is either Unset (never resolved) or the variant that belongs
  to its kind, so readers dispatch on the variant instead of trusting a tag.

- Flag
  • name: long identifier matched after "--" (read-only).
  • alias: optional single character matched after "-", alone or clustered (read-only).
  • kind: Kind (read-only).
  • value / isset / index: resolution state written by the matcher in place.

- declare(name, alias=None, kind=Kind.PRESENCE): factory mirroring Flag(...).

Representation
- FlagType metaclass provides stable __repr__/__rich_repr__ and exposes the
  identity fields listed in __introspectable__ as read-only properties.

Example
    >>> port = declare("port", "p", Kind.INT)
    >>> port
    flag(name='port', alias='p', kind=<Kind.INT: 'int'>, value=Unset, isset=False, index=-1)
"""
import functools
import operator
import re
from enum import Enum
from typing import NamedTuple

from .faults import InvalidArgumentError, FaultCode
from .utils import *


class Presence(NamedTuple):
    """Resolved payload of a PRESENCE flag (always true)."""
    value: bool = True


class Boolean(NamedTuple):
    """Resolved payload of a BOOL flag."""
    value: bool


class Integer(NamedTuple):
    """Resolved payload of an INT flag."""
    value: int


class String(NamedTuple):
    """Resolved payload of a STR flag."""
    value: str


class Kind(Enum):
    """
    Declared kind of a flag.

    Each member knows its resolved-value variant (Kind.variant) and whether a
    value token is expected after the flag token (Kind.requires). BOOL expects
    one but tolerates its absence.
    """
    PRESENCE = "presence"
    BOOL = "bool"
    INT = "int"
    STR = "str"

    @property
    def variant(self):
        return {
            Kind.PRESENCE: Presence,
            Kind.BOOL: Boolean,
            Kind.INT: Integer,
            Kind.STR: String,
        }[self]

    @property
    def requires(self):
        return self is not Kind.PRESENCE


class FlagType(type):
    """
    Metaclass that makes declarations introspectable.

    Responsibilities
    - Expose every name in __introspectable__ as a read-only property (mirror()).
    - Provide stable, readable __repr__/__rich_repr__ implementations that list
      the identity fields followed by the resolution state in __displayable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages and representations.
    """
    __introspectable__ = ()
    __displayable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__ + type(self).__displayable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Flag(metaclass=FlagType):
    """
    One recognized command-line flag and its resolution state.

    Identity (read-only after construction)
    - name: non-empty long identifier, matched literally after "--".
    - alias: None or a single character, matched after "-" (clusters allowed).
    - kind: Kind.

    Resolution state (mutated in place by the matcher)
    - value: Unset until resolved, then the kind's variant (see Kind.variant).
    - isset: whether a parse matched this flag.
    - index: argument-vector position of the flag token (not its value), -1 until matched.

    Resolutions carry over between parse calls on the same registry; call
    clear() to forget them explicitly.
    """

    __introspectable__ = (
        "name",
        "alias",
        "kind",
    )
    __displayable__ = (
        "value",
        "isset",
        "index",
    )

    def __new__(cls, name, alias=None, kind=Kind.PRESENCE):
        """
        Construct a flag declaration.

        Raises
        - InvalidArgumentError: when name is None or empty after trimming.
        - TypeError: when name/alias is not a string or kind is not a Kind.
        - ValueError: when alias is not exactly one character, or is "-".
        """
        if name is None:
            raise InvalidArgumentError(
                f"{cls.__typename__} name is missing",
                title="invalid argument",
                code=FaultCode.INVALID_ARGUMENT,
                hint="declare the flag with a non-empty long name (for example: declare('verbose'))"
            )
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} name must be a string")
        elif not name.strip():
            raise InvalidArgumentError(
                f"{cls.__typename__} name cannot be empty",
                title="invalid argument",
                code=FaultCode.INVALID_ARGUMENT,
                hint="declare the flag with a non-empty long name (for example: declare('verbose'))"
            )

        if alias is not None:
            if not isinstance(alias, str):
                raise TypeError(f"{cls.__typename__} alias must be a string")
            elif len(alias) != 1 or alias == "-":
                raise ValueError(f"{cls.__typename__} alias must be a single character other than '-'")

        if not isinstance(kind, Kind):
            raise TypeError(f"{cls.__typename__} kind must be a Kind")

        self = super().__new__(cls)
        self._name = name
        self._alias = alias
        self._kind = kind
        self.clear()
        return self

    def clear(self):
        """
        Forget any resolution: value becomes Unset, isset False, index -1.
        """
        self.value = Unset
        self.isset = False
        self.index = -1

    def resolve(self, value, index, /):
        """
        Record a match at argument-vector position `index` (last match wins).

        `value` must be the variant of this flag's kind; anything else is a
        programming error and raises TypeError before any state changes.
        """
        if not isinstance(value, self._kind.variant):
            raise TypeError(f"{type(self).__typename__} {self._name!r} cannot hold {type(value).__name__}")
        self.value = value
        self.index = index
        self.isset = True


def declare(name, alias=None, kind=Kind.PRESENCE):
    """
    Declare a flag; alias is optional and kind defaults to presence-only.

    Example
        >>> verbose = declare("verbose", "V")
        >>> port = declare("port", "p", Kind.INT)
    """
    return Flag(name, alias, kind)


__all__ = (
    "Kind",
    "Presence",
    "Boolean",
    "Integer",
    "String",
    "Flag",
    "declare",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in star-imports. Not part of the public API.
del FlagType
