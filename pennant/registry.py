"""
Pennant flag registry and read-only derived queries.

What this module provides
- Registry: an ordered, immutable sequence of Flag declarations plus the
  runtime options the matcher reports faults with (strict, verbose, shell,
  fancy, colorful). The registry never adds or removes declarations after
  construction; the matcher only mutates each declaration in place.
- lookup(registry, name): first declaration answering to a name.
- indexof / valueof / checkof: derived reads over the same resolved state.

Naming in queries
- A bare long name ("port") is tried first against declared names.
- A dashed spelling is then accepted the way it appears on a command line:
  "--port" addresses the long name, "-p" addresses the short alias.

Duplicates
- Declaring the same name or alias twice is a caller mistake but never a crash:
  the first declaration in registry order wins every lookup and every match.
"""
from collections.abc import Sequence
from types import MappingProxyType

from .flags import Flag


class Registry(Sequence):
    """
    Ordered collection of flag declarations owned by the caller.

    Parameters
    - *flags: Flag
      Declarations in priority order. None entries are skipped; anything else
      that is not a Flag raises TypeError.
    - strict: bool
      Malformed integer values fail the parse (InvalidArgumentError) instead of
      being skipped.
    - verbose: bool
      Report soft anomalies (unknown flags/aliases, uncastable or detached
      values) as FlagWarning.
    - shell: bool
      Render faults on stderr (rich) instead of raising; errors exit with status 1.
    - fancy: bool
      Wrap rendered faults in a panel.
    - colorful: bool
      Colorize rendered faults.
    """

    def __init__(
            self,
            *flags,
            strict=False,
            verbose=False,
            shell=False,
            fancy=False,
            colorful=True
    ):
        declarations = []
        for flag in flags:
            if flag is None:
                continue
            if not isinstance(flag, Flag):
                raise TypeError(f"registry entries must be flags, not {type(flag).__name__!r}")
            declarations.append(flag)

        self._flags = tuple(declarations)
        self._options = MappingProxyType({
            "strict": bool(strict),
            "verbose": bool(verbose),
            "shell": bool(shell),
            "fancy": bool(fancy),
            "colorful": bool(colorful),
        })

        # first declaration wins for duplicated names/aliases
        self._names = {}
        self._aliases = {}
        for flag in self._flags:
            self._names.setdefault(flag.name, flag)
            if flag.alias is not None:
                self._aliases.setdefault(flag.alias, flag)

    @property
    def options(self):
        """Read-only mapping of the runtime options given at construction."""
        return self._options

    def __getitem__(self, index):
        return self._flags[index]

    def __len__(self):
        return len(self._flags)

    def byname(self, name, /):
        """First declaration whose long name is exactly `name`, or None."""
        return self._names.get(name)

    def byalias(self, alias, /):
        """First declaration whose short alias is exactly `alias`, or None."""
        return self._aliases.get(alias)

    def clear(self):
        """Forget every resolution so the next parse starts from a pristine state."""
        for flag in self._flags:
            flag.clear()

    def __repr__(self):
        return "registry(%s)" % ", ".join(map(repr, self._flags))

    def __rich_repr__(self):
        yield from self._flags
        yield from self._options.items()


def lookup(registry, name, /):
    """
    Return the declaration addressed by `name`, or None when absent.

    `name` may be the bare long name, "--name", or "-c" for a short alias.
    """
    if not isinstance(registry, Registry):
        raise TypeError("lookup() first argument must be a registry")
    if not isinstance(name, str):
        raise TypeError("lookup() second argument must be a string")

    if (flag := registry.byname(name)) is not None:
        return flag
    if name.startswith("--"):
        return registry.byname(name[2:])
    if name.startswith("-") and len(name) == 2:
        return registry.byalias(name[1])
    return None


def indexof(registry, name, /):
    """
    Argument-vector position where the addressed flag was matched, or -1.
    """
    flag = lookup(registry, name)
    if flag is None or not flag.isset:
        return -1
    return flag.index


def valueof(registry, name, default=None, /):
    """
    Resolved payload of the addressed flag, or `default` when absent or unset.
    """
    flag = lookup(registry, name)
    if flag is None or not flag.isset:
        return default
    return flag.value.value


def checkof(registry, name, /):
    """
    Whether the addressed flag was matched.
    """
    flag = lookup(registry, name)
    return flag is not None and flag.isset


__all__ = (
    "Registry",
    "lookup",
    "indexof",
    "valueof",
    "checkof",
)
