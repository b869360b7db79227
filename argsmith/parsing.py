"""
Argsmith parse engine: token stream → Results, or the help short-circuit.

Parser
- Built from ProgramMetadata plus the option declarations; builds (and owns)
  the OptionRegistry, so configuration mistakes surface at construction.
- parse(tokens) first scans the whole input for a help flag; if one is found
  the pre-rendered help comes back as HelpRequested and nothing else runs.
- Otherwise a two-state machine walks the tokens:
  • expecting a key: "--key[=value]" (long form), "-k" (short form), or, when
    a LIST option exists, the first positional value. From that value on every
    token belongs to the list, dashes included.
  • expecting a value: the token following a short key-value key.
- Values are kept exactly as typed (no trimming, no coercion).

invoke(parser, prompt=Unset)
- Process-level convenience: normalizes the prompt like a shell would, prints
  help and exits with status 0 on request, otherwise returns the Results.

Diagnostics
- Every ParseError names the ordinal position of the offending token.
- With diagnostics on (default) faults also carry detail lines (token,
  option, last completed argument); with diagnostics off those are dropped
  and the fault is raised without chained context.
"""
import logging
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console

from .faults import *
from .registry import build
from .results import ReceivedArgument, Results
from .specs import HELP_FLAGS, Usage
from .utils import Unset, mirror, ordinal

logger = logging.getLogger(__name__)


class HelpRequested:
    """
    Outcome of a parse that met a help flag.

    The text is the registry's pre-rendered help; printing and exiting is left
    to the caller (or to invoke()).
    """

    text = mirror("text")

    def __init__(self, text, /):
        if not isinstance(text, str):
            raise TypeError("help-requested text must be a string")
        self._text = text

    def __str__(self):
        return self._text

    def __repr__(self):
        return "help-requested(lines=%d)" % self._text.count("\n")


class Parser:
    """
    Parse command-line tokens against a fixed set of option declarations.

    Parameters
    - metadata: ProgramMetadata.
    - options: Iterable[OptionSpec] | Mapping[identifier, OptionSpec].
    - diagnostics: bool, attach detail lines to parse faults (default True).

    Raises
    - TypeError / ConfigurationError: see OptionRegistry.

    A parser can be reused for any number of sequential parses; each parse
    starts from a clean state and returns a new Results.
    """

    def __init__(self, metadata, options, /, *, diagnostics=True):
        self._registry = build(metadata, options)
        self.diagnostics = diagnostics
        self._reset(None)

    @property
    def registry(self):
        return self._registry

    @property
    def help(self):
        return self._registry.help

    @property
    def diagnostics(self):
        return self._diagnostics

    @diagnostics.setter
    def diagnostics(self, diagnostics):
        if not isinstance(diagnostics, bool):
            raise TypeError("parser 'diagnostics' must be a boolean")
        self._diagnostics = diagnostics

    def _reset(self, results, /):
        self._results = results
        self._pending = None
        self._last = None
        self._index = 0
        self._active = False
        listing = self._registry.listing
        self._listing = ReceivedArgument(listing) if listing is not None else None

    def _raise(self, cls, message, /, *, code, title, details=()):
        fault = cls(
            message,
            code=code,
            title=title,
            command=self._registry.metadata.command,
            details=details if self._diagnostics else (),
        )
        if self._diagnostics:
            raise fault
        raise fault from None

    def parse(self, tokens, /):
        """
        Parse the tokens (program name excluded).

        Returns
        - HelpRequested: a help flag appears anywhere in the input.
        - Results: every received argument, otherwise.

        Raises
        - TypeError: tokens is not an iterable of strings.
        - ParseError (subclasses): the input does not match the declarations.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = list(tokens)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be an iterable of strings")

        logger.debug("parsing %d token(s) for %r", len(tokens), self._registry.metadata.command)

        if any(token in HELP_FLAGS for token in tokens):
            logger.debug("help requested for %r", self._registry.metadata.command)
            return HelpRequested(self._registry.help)

        self._reset(Results(self._registry))
        try:
            for self._index, token in enumerate(tokens, 1):
                if self._active:
                    self._listing._append(token)
                elif self._pending is not None:
                    self._value(token)
                else:
                    self._key(token)

            if self._pending is not None:
                self._raise(
                    MissingValueError,
                    "input ended while a value was still expected for %s" % self._describe(self._pending.option),
                    code=FaultCode.MISSING_VALUE,
                    title="missing value",
                    details=(("Argument", self._pending),),
                )
            results = self._results
        finally:
            self._reset(None)

        logger.debug("parsed %d argument(s) for %r", len(results), self._registry.metadata.command)
        return results

    def _describe(self, option):
        if option.long_key:
            return "--" + option.long_key
        if option.short_key:
            return "-" + option.short_key
        return "the list"

    def _key(self, token):
        if token.startswith("--"):
            self._keyed(token, token[2:], long=True)
        elif token.startswith("-"):
            self._keyed(token, token[1:], long=False)
        elif self._listing is None:
            self._raise(
                KeyExpectedError,
                "a key was expected at %s position, got %r (check for stray spaces)" % (ordinal(self._index), token),
                code=FaultCode.KEY_EXPECTED,
                title="key expected",
                details=(("Received", token), ("Last argument", self._last)),
            )
        else:
            self._active = True
            self._results._adopt(self._listing)
            self._listing._append(token)
            logger.debug("list started at %s position", ordinal(self._index))

    def _keyed(self, token, body, /, *, long):
        key, assignment, value = body.partition("=")
        position = ordinal(self._index)

        if (option := self._registry.lookup(key)) is None:
            self._raise(
                UnknownKeyError,
                "no key matches %r at %s position" % (token, position),
                code=FaultCode.UNKNOWN_KEY,
                title="unknown key",
                details=(("Bad key", key), ("Last argument", self._last)),
            )
        if not long and key == option.long_key:
            self._raise(
                SingleDashLongKeyError,
                "long key %r used with a single dash at %s position, write --%s" % (key, position, key),
                code=FaultCode.SINGLE_DASH_LONG_KEY,
                title="single dash long key",
                details=(("Token", token), ("Option", option)),
            )
        if long and key[:1] == option.short_key:
            self._raise(
                DoubleDashShortKeyError,
                "%r at %s position starts with the short key %r after a double dash, write -%s" % (
                    token, position, option.short_key, option.short_key
                ),
                code=FaultCode.DOUBLE_DASH_SHORT_KEY,
                title="double dash short key",
                details=(("Token", token), ("Option", option)),
            )
        # unreachable from parse(): _value() takes every token while a value is pending
        if self._pending is not None:
            self._raise(
                PendingValueError,
                "key %r at %s position while a value for %s is still expected" % (
                    token, position, self._describe(self._pending.option)
                ),
                code=FaultCode.PENDING_VALUE,
                title="pending value",
                details=(("Token", token), ("Pending argument", self._pending)),
            )

        received = self._results.result(option)
        if received is not None and len(received) and not option.repeatable:
            self._raise(
                RepeatedArgumentError,
                "%s at %s position was already passed and is not repeatable" % (self._describe(option), position),
                code=FaultCode.REPEATED_ARGUMENT,
                title="repeated argument",
                details=(("Token", token), ("Received", received)),
            )

        match option.usage:
            case Usage.KEY:
                if assignment:
                    self._raise(
                        KeyAssignmentError,
                        "key %r at %s position does not take a value" % (token, position),
                        code=FaultCode.KEY_ASSIGNMENT,
                        title="key assignment",
                        details=(("Token", token), ("Option", option)),
                    )
                self._complete(option, "")
            case Usage.KEY_VALUE if long:
                if not assignment:
                    self._raise(
                        MissingInlineValueError,
                        "long key %r at %s position needs a value, write --%s=value" % (token, position, key),
                        code=FaultCode.MISSING_INLINE_VALUE,
                        title="missing inline value",
                        details=(("Token", token), ("Option", option)),
                    )
                self._complete(option, value)
            case Usage.KEY_VALUE:
                if assignment:
                    self._raise(
                        ShortAssignmentError,
                        "short key %r at %s position takes its value as the next token, write -%s value" % (
                            token, position, key
                        ),
                        code=FaultCode.SHORT_ASSIGNMENT,
                        title="short assignment",
                        details=(("Token", token), ("Option", option)),
                    )
                self._pending = self._results._receive(option)
            case Usage.LIST:
                self._raise(
                    KeyedListError,
                    "list option %r at %s position cannot be used as a key" % (token, position),
                    code=FaultCode.KEYED_LIST,
                    title="keyed list",
                    details=(("Token", token), ("Option", option)),
                )

    def _value(self, token):
        if token.startswith("-"):
            self._raise(
                MalformedValueError,
                "expected a value for %s at %s position, got the key %r" % (
                    self._describe(self._pending.option), ordinal(self._index), token
                ),
                code=FaultCode.MALFORMED_VALUE,
                title="malformed value",
                details=(("Malformed value", token), ("Last argument", self._last)),
            )
        self._pending._append(token)
        self._last, self._pending = self._pending, None

    def _complete(self, option, value):
        received = self._results._receive(option)
        received._append(value)
        self._last = received

    def __repr__(self):
        return "parser(command=%r, diagnostics=%r)" % (self._registry.metadata.command, self._diagnostics)


def invoke(parser, prompt=Unset):
    """
    Parse a process prompt, handling the help short-circuit.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; split via shlex.split.
      • Iterable[str]: pre-tokenized sequence, used as-is.

    Behavior
    - HelpRequested: the help text is written to stdout through rich and
      SystemExit(0) is raised.
    - Otherwise the Results are returned; ParseError propagates.
    """
    if not isinstance(parser, Parser):
        raise TypeError("invoke() first argument must be a Parser")

    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("invoke() argument must be a string or an iterable of strings")
    else:
        raise TypeError("invoke() argument must be a string or an iterable of strings")

    outcome = parser.parse(tokens)
    if isinstance(outcome, HelpRequested):
        Console().out(outcome.text, highlight=False, end="")
        sys.exit(0)
    return outcome


__all__ = (
    "HelpRequested",
    "Parser",
    "invoke",
)
