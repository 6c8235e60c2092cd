"""
Typed accessors over resolved flags.

Every accessor returns the resolved payload only when the flag exists, was
matched, and holds the variant the accessor reads; in every other case the
caller's default comes back unchanged (same object). Asking with the wrong
accessor is therefore never an error, it simply yields the default.

Accessors are pure reads: calling one twice returns identical values.
"""
import warnings

from .flags import Presence, Boolean, Integer, String


def _read(flag, variant, default):
    if flag is not None and flag.isset and isinstance(flag.value, variant):
        return flag.value.value
    return default


def getpresence(flag, default=False, /):
    """True when a PRESENCE flag was matched, otherwise `default`."""
    return _read(flag, Presence, default)


def getbool(flag, default=False, /):
    """Resolved boolean of a BOOL flag, otherwise `default`."""
    return _read(flag, Boolean, default)


def getint(flag, default=0, /):
    """Resolved integer of an INT flag, otherwise `default`."""
    return _read(flag, Integer, default)


def getstr(flag, default=None, /):
    """Resolved string of a STR flag, otherwise `default`."""
    return _read(flag, String, default)


def getnull(flag, default=False, /):
    """
    Deprecated spelling of getpresence().
    """
    warnings.warn("getnull() is deprecated, use getpresence() instead", DeprecationWarning, stacklevel=2)
    return getpresence(flag, default)


__all__ = (
    "getpresence",
    "getbool",
    "getint",
    "getstr",
    "getnull",
)
