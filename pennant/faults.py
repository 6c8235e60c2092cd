"""
Pennant faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the matcher
  can surface. Codes are grouped by domain so logs and searches stay predictable.
- ParseError / FlagWarning: base types that carry message + options and know
  how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Error policy
- ParseError subclasses terminate a parse call: InvalidArgumentError,
  MissingValueError, OutOfMemoryError.
- FlagWarning subclasses describe soft anomalies (unknown flag, unknown alias,
  uncastable value, detached value). They never change the outcome of a parse
  and are only surfaced for verbose registries.

Integration
- The matcher builds a fault and calls trigger(fault, **registry.options).
- In non-shell mode, errors are raised and warnings go through warnings.warn;
  in shell mode, both are rendered via rich on stderr and errors exit with status 1.
"""
import copy
import inspect
import os
import re
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the matcher (stable identifiers).

    grouping (by high-level domain)
    - errors (13xxx), always terminating a parse call
      • INVALID_ARGUMENT, MISSING_VALUE, OUT_OF_MEMORY
    - soft anomalies (14xxx), reported only by verbose registries
      • UNKNOWN_FLAG, UNKNOWN_ALIAS, UNCASTABLE_VALUE, DETACHED_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- terminating errors (13xxx) ---
    INVALID_ARGUMENT            = 13101
    MISSING_VALUE               = 13102
    OUT_OF_MEMORY               = 13103

    # --- soft anomalies (14xxx) ---
    UNKNOWN_FLAG                = 14101
    UNKNOWN_ALIAS               = 14102
    UNCASTABLE_VALUE            = 14111
    DETACHED_VALUE              = 14112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, /):
    """
    build the rich renderable shared by errors and warnings.

    the header reads "[ prog — code | title ]", followed by the message and a
    single hint line. fancy mode wraps everything in a panel.
    """
    main = __import__("__main__")
    options = fault.options

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    prog = text(getattr(main, "__prog__", os.path.basename(sys.argv[0]) or "pennant"), styler("prog-name"))
    code = options.get("code")

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
        " | ",
        text(str(options.get("title", re.sub(r"(?<!^)(?=[A-Z])", " ", type(fault).__name__))).title(), styler("title")),
        " ]"
    )
    message = text(coalesce(fault.message, ""), styler("message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options.get("hint"), styler("hint")))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left")

    return Group(header, message, hint)


class ParseError(Exception):
    """
    base of every fault that terminates a parse call.

    the message is a lowercased, position-first sentence; options carry the
    rendering context (code, title, hint, shell, fancy, colorful) and any
    details the reporter attached (flag, token, index).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidArgumentError(ParseError, ValueError): ...
class MissingValueError(ParseError): ...
class OutOfMemoryError(ParseError, MemoryError): ...


class FlagWarning(ABC, Warning):
    """
    base of every soft anomaly; rendering mirrors ParseError with warning colors.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownFlagWarning(FlagWarning): ...
class UnknownAliasWarning(FlagWarning): ...
class UncastableValueWarning(FlagWarning): ...
class DetachedValueWarning(FlagWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, errors are raised
      and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, title, code, hint, docs, and any other context
      the reporter may want to show (e.g., flag/token/index).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ParseError",
    "InvalidArgumentError",
    "MissingValueError",
    "OutOfMemoryError",
    "FlagWarning",
    "UnknownFlagWarning",
    "UnknownAliasWarning",
    "UncastableValueWarning",
    "DetachedValueWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
