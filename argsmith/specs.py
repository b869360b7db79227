r"""
Argsmith declarations: option specifications and program metadata.

Overview
- Usage: how an option is written on the command line.
  • KEY        → presence only:           -r / --Use-Defaults
  • KEY_VALUE  → key plus one value:      -t Black / --Set-Text=Black
  • LIST       → trailing positional list: ... a.json b.json c.json
- OptionSpec: one accepted argument (short key, long key, usage, flags, help copy).
- ProgramMetadata: program identity used by the help renderer.
- HELP_FLAGS: reserved tokens that always print help.

Introspection & representation
- SpecType metaclass exposes the fields listed in __introspectable__ as
  read-only properties and provides stable __repr__/__rich_repr__ for
  diagnostics and rich.pretty.

Validation split
- Construction only checks types and key spelling (TypeError / ValueError),
  so a spec can always be built and shown in messages.
- Semantic rules (a key must exist, long keys need two characters, usage is
  required, no duplicates, a single LIST) belong to the registry and surface
  as ConfigurationError when the parser is built.

Quick example:
    >>> from argsmith import OptionSpec, ProgramMetadata, Usage
    >>> text = OptionSpec(short_key="t", long_key="Set-Text", usage=Usage.KEY_VALUE)
    >>> program = ProgramMetadata("ColColorize", name="Set Console Colours")
"""
import enum
import functools
import operator
import re

from .utils import *


HELP_FLAGS = ("-h", "--help", "--Help")
"""Reserved tokens: any of them anywhere in the input short-circuits parsing into help."""


class Usage(enum.Enum):
    """
    How an option is written on the command line.
    """
    KEY = "key"
    KEY_VALUE = "key-value"
    LIST = "list"


class SpecType(type):
    """
    Metaclass that turns declarations into immutable, introspectable records.

    Responsibilities
    - Derive __typename__ from the class name (OptionSpec → "option-spec") for
      messages and reprs.
    - Expose every name in __introspectable__ as a read-only property backed
      by the private "_{name}" field.
    - Provide stable __repr__/__rich_repr__ implementations.
    """

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

        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"

        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)

        self.__repr__ = __repr__
        self.__rich_repr__ = __rich_repr__
        return self


def _sanitize_text(cls, metadata, name, /, *, strip=True):
    """
    Internal: validate a free-text field and materialize its default.

    - Unset becomes "" (the "not provided" value for help copy).
    - Anything else must be a string; descriptions are trimmed, examples are
      kept verbatim (strip=False) since they are shown literally.
    """
    if not isinstance(text := metadata[name], str | Unset):
        raise TypeError(f"{cls.__typename__} {name!r} must be a string")
    text = coalesce(text, "")
    metadata[name] = text.strip() if strip else text


def _sanitize_keys(cls, metadata, /):
    r"""
    Internal: validate the spelling of the short and long keys.

    Responsibilities
    - short_key: Unset/None → None; otherwise exactly one character that is not
      whitespace, '-' or '='.
    - long_key: Unset/None → ""; otherwise a string without whitespace or '='
      that does not start with '-'. Its length is NOT checked here: a one
      character long key is a configuration mistake reported by the registry.

    Raises
    - TypeError: a key is not a string.
    - ValueError: a key cannot be typed on a command line as a key.
    """
    short = coalesce(metadata["short_key"])
    if short is not None:
        if not isinstance(short, str):
            raise TypeError(f"{cls.__typename__} 'short_key' must be a string")
        if len(short) != 1:
            raise ValueError(f"{cls.__typename__} 'short_key' must be a single character")
        if short.isspace() or short in "-=":
            raise ValueError(f"{cls.__typename__} 'short_key' {short!r} cannot be used as a key")
    metadata["short_key"] = short

    long = coalesce(metadata["long_key"]) or ""
    if not isinstance(long, str):
        raise TypeError(f"{cls.__typename__} 'long_key' must be a string")
    if re.search(r"[\s=]", long) or long.startswith("-"):
        raise ValueError(f"{cls.__typename__} 'long_key' {long!r} cannot be used as a key")
    metadata["long_key"] = long


class OptionSpec(metaclass=SpecType):
    """
    One accepted command-line argument.

    Fields (read-only after construction)
    - short_key: str | None, a single character used as "-x".
    - long_key: str, "" when absent, used as "--Long-Key".
    - usage: Usage | Unset, KEY, KEY_VALUE or LIST (required by the registry).
    - repeatable: bool, the option may occur more than once; every value is kept.
    - exclusive: bool, the option is meant to be used on its own (shown in help).
    - description: str, help copy.
    - short_example / long_example / list_example: placeholders shown in the
      generated examples.

    Identity
    - Specs compare and hash by identity: results are keyed by the spec object
      itself, never by a copy with equal fields.
    """

    __introspectable__ = (
        "short_key",
        "long_key",
        "usage",
        "repeatable",
        "exclusive",
        "description",
        "short_example",
        "long_example",
        "list_example",
    )

    def __init__(
            self,
            *,
            short_key=Unset,
            long_key=Unset,
            usage=Unset,
            repeatable=False,
            exclusive=False,
            description=Unset,
            short_example="{value}",
            long_example="{value}",
            list_example="{value} {value} {value}",
    ):
        metadata = {
            "short_key": short_key,
            "long_key": long_key,
            "usage": usage,
            "repeatable": bool(repeatable),
            "exclusive": bool(exclusive),
            "description": description,
            "short_example": short_example,
            "long_example": long_example,
            "list_example": list_example,
        }
        _sanitize_keys(type(self), metadata)
        if not isinstance(metadata["usage"], Usage | Unset):
            raise TypeError(f"{type(self).__typename__} 'usage' must be a Usage member")
        _sanitize_text(type(self), metadata, "description")
        for name in ("short_example", "long_example", "list_example"):
            _sanitize_text(type(self), metadata, name, strip=False)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def keys(self):
        """Declared key strings, short first (empty for a key-less LIST)."""
        return tuple(filter(None, (self._short_key, self._long_key)))


class ProgramMetadata(metaclass=SpecType):
    """
    Program identity used by the help renderer.

    - command: the mnemonic users type; shown in every generated example.
    - name: display name for the title box; falls back to command.
    - description, author, version: optional help copy.
    """

    __introspectable__ = (
        "command",
        "name",
        "description",
        "author",
        "version",
    )

    def __init__(self, command, /, name=Unset, description=Unset, author=Unset, version=Unset):
        metadata = {
            "command": command,
            "name": name,
            "description": description,
            "author": author,
            "version": version,
        }
        for field in metadata:
            _sanitize_text(type(self), metadata, field)
        metadata["name"] = metadata["name"] or metadata["command"]

        for field, object in metadata.items():
            setattr(self, "_" + field, object)


__all__ = (
    # Classes
    "Usage",
    "OptionSpec",
    "ProgramMetadata",

    # Constants
    "HELP_FLAGS",
)

del SpecType
