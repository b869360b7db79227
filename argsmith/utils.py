"""
Argsmith utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the specs, registry, renderer and parser so
  that "not provided", read-only exposure and text layout behave the same
  everywhere.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/"".

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr);
    containers are handed out frozen (tuple / mapping proxy / frozenset).

- wrap(text, width)
  • Greedy, space-delimited word wrap used by the help renderer.

- ordinal(number)
  • Human-friendly position labels ("first", "second", "11th") for diagnostics.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce("", "fallback")
    ''
    >>> wrap("one two three", 7)
    ['one two', 'three']
    >>> ordinal(3)
    'third'
"""
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Used where None is a meaningful user value (a spec without a short key)
    but the API still needs to tell “not provided” apart from it.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and "".
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable and a process-wide singleton.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0 or "" are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("b", None)    -> "b"
    - coalesce(Unset, None)  -> None
    - coalesce("", "x")      -> ""
    """
    return object if object is not Unset else default


def _freeze(object):
    """
    Shallow read-only snapshot of container values.

    - Sequence (non-string) → tuple
    - Mapping → MappingProxyType
    - Set → frozenset
    - anything else is returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(object)
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and hands out a
    frozen snapshot for container types, so the public surface cannot be used
    to mutate internal state.

    Example
    - Given self._values, declare values = mirror("values") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _freeze(getattr(self, "_" + name))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


def wrap(text, width, /):
    """
    Greedy, space-delimited word wrap.

    Words are accumulated while the running line length plus one separating
    space does not exceed `width`; otherwise the accumulated line is emitted
    and a new one is started. The final partial line is always emitted.

    Notes
    - Runs of spaces collapse to one (empty words are skipped).
    - A single word wider than `width` is placed on a line of its own, unbroken.
    - An empty or blank text yields no lines at all.
    """
    if not isinstance(text, str):
        raise TypeError("wrap() first argument must be a string")
    if not isinstance(width, int) or width < 1:
        raise ValueError("wrap() second argument must be a positive integer")

    lines = []
    line = ""
    for word in filter(None, text.split(" ")):
        if not line:
            line = word
        elif len(line) + 1 + len(word) <= width:
            line += " " + word
        else:
            lines.append(line.strip())
            line = word
    if line:
        lines.append(line.strip())
    return lines


@functools.cache
def ordinal(number, /):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
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

    # 11th, 12th, 13th (and 111th, 112th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f"{number}%s" % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None (or "") is a valid, user-meaningful value but
you still need to distinguish “no input”. Materialize with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "wrap",
    "ordinal",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
