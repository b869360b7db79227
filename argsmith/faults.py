"""
Argsmith faults (configuration and parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault. Codes are
  grouped by domain (configuration 21xxx, parsing 22xxx) so logs and searches
  stay predictable.
- ArgumentFault: base type carrying a message plus read-only options
  (code, title, hint, details) and able to render itself through rich.
- ConfigurationError: programmer mistakes in the declared options; raised while
  the registry is built or the help text is rendered. Startup-fatal.
- ParseError: user mistakes in the token stream; raised while parsing. Its text
  always ends with the help hint.

UX goals
- Position-first parse messages (“at third position”) so users learn by trying.
- Detail lines (`Label: value`) carry the offending token and neighbouring
  arguments; the parser can switch them off (diagnostics=False).

Integration
- The registry and parser raise these directly; nothing is recovered internally.
- Printing a fault with a rich Console uses __rich__; str() gives plain text.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.text import Text

from .specs import HELP_FLAGS


HELP_HINT = "Use %s or %s for help." % (", ".join(HELP_FLAGS[:-1]), HELP_FLAGS[-1])


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - configuration (21xxx)
      • MISSING_COMMAND, MISSING_KEYS, SHORT_LONG_KEY, MISSING_USAGE,
        DUPLICATED_KEY, MULTIPLE_LISTS, LONG_KEY_OVERFLOW
    - parsing (22xxx)
      • KEY_EXPECTED, UNKNOWN_KEY, SINGLE_DASH_LONG_KEY, DOUBLE_DASH_SHORT_KEY,
        PENDING_VALUE, REPEATED_ARGUMENT, KEY_ASSIGNMENT, MISSING_INLINE_VALUE,
        SHORT_ASSIGNMENT, KEYED_LIST, MALFORMED_VALUE, MISSING_VALUE
    """
    # --- configuration errors (21xxx) ---
    MISSING_COMMAND         = 21101
    MISSING_KEYS            = 21111
    SHORT_LONG_KEY          = 21112
    MISSING_USAGE           = 21113
    DUPLICATED_KEY          = 21121
    MULTIPLE_LISTS          = 21122
    LONG_KEY_OVERFLOW       = 21131

    # --- parse errors (22xxx) ---
    KEY_EXPECTED            = 22101
    UNKNOWN_KEY             = 22111
    SINGLE_DASH_LONG_KEY    = 22112
    DOUBLE_DASH_SHORT_KEY   = 22113
    PENDING_VALUE           = 22121
    REPEATED_ARGUMENT       = 22122
    KEY_ASSIGNMENT          = 22131
    MISSING_INLINE_VALUE    = 22132
    SHORT_ASSIGNMENT        = 22133
    KEYED_LIST              = 22134
    MALFORMED_VALUE         = 22141
    MISSING_VALUE           = 22142

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgumentFault(Exception):
    """
    Base for every fault raised by argsmith.

    Parameters
    - message: str, one-sentence description of what went wrong.
    - options: keyword metadata, exposed read-only through .options:
      • code: FaultCode
      • title: short lowercase headline used by the rich renderer
      • hint: one actionable suggestion
      • details: tuple of (label, value) pairs appended to str()
      • command: program mnemonic shown in the rich header
      • colorful: bool, styled rich output (default True)
    """

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def details(self):
        return tuple(self.options.get("details", ()))

    def __str__(self):
        lines = [self.message]
        lines.extend("%s: %s" % (label, value) for label, value in self.details)
        return "\n".join(lines)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title

            # body
            "message": "#C8C8D0",  # soft light gray message
            "detail": "dim",
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles[style] if colorful else "")

        header = Text.assemble(
            "[ ",
            text(self.options.get("command", "argsmith"), "prog-name"),
            " — ",
            text(self.code.normalize() if self.code else "-", "code"),
            " | ",
            text(self.options.get("title", type(self).__name__).title(), "title"),
            " ]",
        )
        renders = [header, text(self.message, "message")]
        renders.extend(text("%s: %s" % (label, value), "detail") for label, value in self.details)
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
        return Group(*renders)


class ConfigurationError(ArgumentFault):
    """
    The declared options or program metadata are inconsistent.

    Raised only while a registry is built (or its help rendered); signals a
    programmer mistake and is not meant to be caught at runtime.
    """


class MissingCommandError(ConfigurationError): ...
class MissingKeysError(ConfigurationError): ...
class ShortLongKeyError(ConfigurationError): ...
class MissingUsageError(ConfigurationError): ...
class DuplicatedKeyError(ConfigurationError): ...
class MultipleListsError(ConfigurationError): ...
class LongKeyOverflowError(ConfigurationError): ...


class ParseError(ArgumentFault):
    """
    The token stream does not match the declared options.

    str() is the message, then any detail lines, then the help hint. The
    hint is always present, the details only when the parser keeps
    diagnostics.
    """

    def __init__(self, message, /, **options):
        super().__init__(message, **{"hint": HELP_HINT} | options)

    def __str__(self):
        return super().__str__() + "\n" + HELP_HINT


class KeyExpectedError(ParseError): ...
class UnknownKeyError(ParseError): ...
class SingleDashLongKeyError(ParseError): ...
class DoubleDashShortKeyError(ParseError): ...
class PendingValueError(ParseError): ...
class RepeatedArgumentError(ParseError): ...
class KeyAssignmentError(ParseError): ...
class MissingInlineValueError(ParseError): ...
class ShortAssignmentError(ParseError): ...
class KeyedListError(ParseError): ...
class MalformedValueError(ParseError): ...
class MissingValueError(ParseError): ...


__all__ = (
    "FaultCode",
    "ArgumentFault",
    "ConfigurationError",
    "MissingCommandError",
    "MissingKeysError",
    "ShortLongKeyError",
    "MissingUsageError",
    "DuplicatedKeyError",
    "MultipleListsError",
    "LongKeyOverflowError",
    "ParseError",
    "KeyExpectedError",
    "UnknownKeyError",
    "SingleDashLongKeyError",
    "DoubleDashShortKeyError",
    "PendingValueError",
    "RepeatedArgumentError",
    "KeyAssignmentError",
    "MissingInlineValueError",
    "ShortAssignmentError",
    "KeyedListError",
    "MalformedValueError",
    "MissingValueError",
    "HELP_HINT",
)
