"""
Pennant matcher: resolve an argument vector against a flag registry.

Token shapes
- "--name"        long flag; compared literally with declared names.
- "--name value"  long flag consuming the next token (BOOL/INT/STR).
- "-c"            single short alias.
- "-abc"          cluster of short aliases, each matched independently.
- "-c value"      short alias consuming the next token when it is the last
                  letter of its cluster and its kind takes a value.
- anything else   skipped (positionals are never matched by themselves).

Value policy
- PRESENCE never consumes a token.
- INT/STR always consume the next token, whatever it looks like ("-5" is a value);
  when nothing follows, the parse fails with MissingValueError.
- BOOL consumes the next token only when it exists and does not begin with "-";
  a bare BOOL flag means true. "true"/"1" and "false"/"0" are recognized, any
  other value token means true.
  This applies to long BOOL flags as well as to aliases: "--enable --port 1"
  matches "--enable" as true and leaves "--port" to be matched as a flag, even
  though a token does follow "--enable". A flag-shaped token is never taken as
  a boolean value.
- INT accepts a full ASCII base-10 signed integer. Anything else leaves the
  flag untouched for that occurrence (the value token is still consumed);
  strict registries fail with InvalidArgumentError instead.

Resolution policy
- Last match wins: a later occurrence overwrites an earlier resolution.
- First declaration wins: when several declarations share a name or alias, the
  first one in registry order takes the token.
- Failures do not roll back: flags matched before the failing token stay matched.
- Soft anomalies (unknown flags or aliases, uncastable values, INT/STR aliases
  in the middle of a cluster) never fail the parse; verbose registries report
  them as warnings.
"""
import functools
import re
import shlex
import sys
from collections.abc import Iterable

from .faults import *
from .flags import Kind, Presence, Boolean, Integer, String
from .registry import Registry
from .utils import *

_INTEGER = re.compile(r"[+-]?[0-9]+")


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth") for nicer phrasing in messages.
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def coerce(kind, token, /):
    """
    Convert a raw value token into the resolved variant of `kind`.

    Returns Unset when the token cannot represent a value of that kind (only
    possible for INT). PRESENCE ignores the token.
    """
    match kind:
        case Kind.PRESENCE:
            return Presence()
        case Kind.BOOL:
            if token in ("false", "0"):
                return Boolean(False)
            # "true", "1", and anything unrecognized
            return Boolean(True)
        case Kind.INT:
            if not _INTEGER.fullmatch(token):
                return Unset
            try:
                return Integer(int(token))
            except ValueError:  # beyond the interpreter's digit limit
                return Unset
        case Kind.STR:
            return String(token)
    raise TypeError("coerce() first argument must be a kind")


class Matcher:
    """
    Single left-to-right pass over one argument vector.

    A Matcher is built per parse call; it only reads the registry indexes and
    writes resolutions into the registry's declarations.
    """

    def __init__(self, registry, tokens, start=0):
        self.registry = registry
        self.tokens = tokens
        self.start = start
        self.index = start

    def _position(self, index):
        return _ordinal(index - self.start + 1)

    def _warn(self, fault):
        if self.registry.options["verbose"]:
            trigger(fault, **self.registry.options)

    def _fail(self, fault):
        trigger(fault, **self.registry.options)

    def _follows(self, *, boolean=False):
        """
        Whether a value token is available at the cursor.

        BOOL flags only take a following token that is not itself flag-shaped.
        """
        if self.index >= len(self.tokens):
            return False
        if boolean:
            token = self.tokens[self.index]
            return isinstance(token, str) and not token.startswith("-")
        return True

    def _missing(self, flag, spelling, origin):
        self._fail(MissingValueError(
            "missing value for flag %r at %s position" % (spelling, self._position(origin)),
            title="missing value",
            code=FaultCode.MISSING_VALUE,
            hint="pass a %s value after it (for example: %s <value>)" % (flag.kind.value, spelling),
            flag=flag,
            token=spelling,
            index=origin,
            docs=getdoc(FaultCode.MISSING_VALUE)
        ))

    def _consume(self, flag, spelling, origin):
        """
        Take the token at the cursor as the value of `flag` and store it.
        """
        token = self.tokens[self.index]
        self.index += 1

        if token is None:
            return self._warn(DetachedValueWarning(
                "flag %r at %s position has no usable value" % (spelling, self._position(origin)),
                title="detached value",
                code=FaultCode.DETACHED_VALUE,
                hint="pass a value right after %s" % spelling,
                flag=flag,
                token=spelling,
                index=origin,
                docs=getdoc(FaultCode.DETACHED_VALUE)
            ))

        try:
            value = coerce(flag.kind, token)
        except MemoryError:
            return self._fail(OutOfMemoryError(
                "cannot store the value of flag %r at %s position" % (spelling, self._position(origin)),
                title="out of memory",
                code=FaultCode.OUT_OF_MEMORY,
                hint="pass a shorter value or free some memory",
                flag=flag,
                token=spelling,
                index=origin,
                docs=getdoc(FaultCode.OUT_OF_MEMORY)
            ))

        if value is Unset:
            fault = "%r is not a base-10 integer for flag %r at %s position" % (
                token, spelling, self._position(origin)
            )
            if self.registry.options["strict"]:
                return self._fail(InvalidArgumentError(
                    fault,
                    title="invalid integer",
                    code=FaultCode.INVALID_ARGUMENT,
                    hint="pass digits with an optional sign (for example: %s 42)" % spelling,
                    flag=flag,
                    token=token,
                    index=origin,
                    docs=getdoc(FaultCode.INVALID_ARGUMENT)
                ))
            return self._warn(UncastableValueWarning(
                fault,
                title="uncastable value",
                code=FaultCode.UNCASTABLE_VALUE,
                hint="pass digits with an optional sign (for example: %s 42)" % spelling,
                flag=flag,
                token=token,
                index=origin,
                docs=getdoc(FaultCode.UNCASTABLE_VALUE)
            ))

        flag.resolve(value, origin)

    def _long(self, token, origin):
        """
        resolve "--name" (and its value token, if the kind takes one).
        """
        flag = self.registry.byname(token[2:])

        if flag is None:
            return self._warn(UnknownFlagWarning(
                "unknown flag %r at %s position" % (token, self._position(origin)),
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint="declare it in the registry or remove it",
                token=token,
                index=origin,
                docs=getdoc(FaultCode.UNKNOWN_FLAG)
            ))

        match flag.kind:
            case kind if not kind.requires:
                flag.resolve(Presence(), origin)
            case Kind.BOOL if not self._follows(boolean=True):
                flag.resolve(Boolean(True), origin)
            case _ if not self._follows():
                self._missing(flag, token, origin)
            case _:
                self._consume(flag, token, origin)

    def _cluster(self, token, origin):
        """
        resolve "-abc": every letter is an alias; only the last one may take a value.
        """
        letters = token[1:]

        for position, letter in enumerate(letters):
            last = position == len(letters) - 1
            spelling = "-" + letter
            flag = self.registry.byalias(letter)

            if flag is None:
                self._warn(UnknownAliasWarning(
                    "unknown alias %r in %r at %s position" % (letter, token, self._position(origin)),
                    title="unknown alias",
                    code=FaultCode.UNKNOWN_ALIAS,
                    hint="declare a flag with alias %r or remove it" % letter,
                    token=token,
                    index=origin,
                    docs=getdoc(FaultCode.UNKNOWN_ALIAS)
                ))
                continue

            match flag.kind:
                case kind if not kind.requires:
                    flag.resolve(Presence(), origin)
                case Kind.BOOL if not (last and self._follows(boolean=True)):
                    flag.resolve(Boolean(True), origin)
                case Kind.BOOL:
                    self._consume(flag, spelling, origin)
                case _ if not last:
                    self._warn(DetachedValueWarning(
                        "alias %r in %r at %s position cannot take a value" % (letter, token, self._position(origin)),
                        title="detached value",
                        code=FaultCode.DETACHED_VALUE,
                        hint="move %r to the end of the cluster or pass it on its own (for example: -%s <value>)" % (
                            letter, letter
                        ),
                        flag=flag,
                        token=token,
                        index=origin,
                        docs=getdoc(FaultCode.DETACHED_VALUE)
                    ))
                case _ if not self._follows():
                    self._missing(flag, spelling, origin)
                case _:
                    self._consume(flag, spelling, origin)

    def run(self):
        while self.index < len(self.tokens):
            origin = self.index
            token = self.tokens[origin]
            self.index += 1

            if token is None or not token.startswith("-") or token == "-":
                continue
            if token.startswith("--"):
                self._long(token, origin)
            else:
                self._cluster(token, origin)


def _tokenize(args):
    """
    Normalize the argument vector into a list of tokens (None entries are kept
    in place so positions stay aligned with the caller's sequence).
    """
    if isinstance(args, str):
        return shlex.split(args)
    if isinstance(args, Iterable):
        return list(args)
    raise TypeError("parse() second argument must be a string or an iterable of strings")


def parse(registry, args=Unset, /, *, start=Unset):
    """
    Match `args` against `registry`, resolving its declarations in place.

    Parameters
    - registry: Registry
    - args:
      • Unset: read sys.argv (the program name is skipped: start defaults to 1).
      • str: shell-like string; split via shlex.split.
      • Iterable[str]: pre-tokenized sequence, used verbatim (no trimming).
    - start: int
      Index of the first token to match; earlier tokens are never matched.
      Defaults to 0 for explicit arguments. Reported indices are positions in `args`.

    Raises
    - InvalidArgumentError: registry or args is None, a token is neither a string
      nor None, a string prompt cannot be split, or (strict registries) an
      integer value is malformed.
    - MissingValueError: an INT/STR flag is the last token.
    - OutOfMemoryError: a value could not be stored.
    - TypeError/ValueError: wrong types for registry/args/start.

    In shell registries, errors are rendered on stderr and the process exits
    with status 1 instead of raising.
    """
    if registry is None:
        raise InvalidArgumentError(
            "registry is missing",
            title="invalid argument",
            code=FaultCode.INVALID_ARGUMENT,
            hint="build a Registry of declared flags and pass it first"
        )
    if not isinstance(registry, Registry):
        raise TypeError("parse() first argument must be a registry")

    if args is None:
        return trigger(InvalidArgumentError(
            "argument vector is missing",
            title="invalid argument",
            code=FaultCode.INVALID_ARGUMENT,
            hint="pass a sequence of tokens, a string, or nothing to read sys.argv",
            docs=getdoc(FaultCode.INVALID_ARGUMENT)
        ), **registry.options)

    if args is Unset:
        tokens = list(sys.argv)
        start = coalesce(start, 1)
    else:
        try:
            tokens = _tokenize(args)
        except ValueError as exception:
            return trigger(InvalidArgumentError(
                "argument string cannot be split: %s" % str(exception).lower(),
                title="invalid argument",
                code=FaultCode.INVALID_ARGUMENT,
                hint="balance the quotes or escape them",
                docs=getdoc(FaultCode.INVALID_ARGUMENT)
            ), **registry.options)
        start = coalesce(start, 0)

    if not isinstance(start, int) or isinstance(start, bool):
        raise TypeError("parse() 'start' must be an integer")
    if start < 0:
        raise ValueError("parse() 'start' cannot be negative")

    for position, token in enumerate(tokens):
        if token is not None and not isinstance(token, str):
            return trigger(InvalidArgumentError(
                "token at index %d is %s, not a string" % (position, type(token).__name__),
                title="invalid argument",
                code=FaultCode.INVALID_ARGUMENT,
                hint="convert every argument to a string before parsing",
                index=position,
                docs=getdoc(FaultCode.INVALID_ARGUMENT)
            ), **registry.options)

    Matcher(registry, tokens, start).run()


__all__ = (
    "Matcher",
    "coerce",
    "parse",
)
