"""
Argsmith parse results: received arguments and the query surface over them.

- ReceivedArgument: the ordered text values collected for one OptionSpec
  during a single parse (one entry per occurrence, "" for a KEY).
- Results: read-only view over every ReceivedArgument of a parse, queried by
  spec, key string or caller identifier.

Both are produced by the parser; callers only read them.
"""
from .registry import OptionRegistry
from .utils import mirror


class ReceivedArgument:
    """
    Values received for one option, in arrival order.

    Properties
    - option: the owning OptionSpec.
    - values: tuple of every received value.
    - value: the first received value (the only one unless repeatable/LIST).
    """

    option = mirror("option")
    values = mirror("values")

    def __init__(self, option, /):
        self._option = option
        self._values = []

    @property
    def value(self):
        return self._values[0] if self._values else None

    def _append(self, value, /):
        self._values.append(value)

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(tuple(self._values))

    def __repr__(self):
        return "received-argument(option=%r, values=%r)" % (self._option, tuple(self._values))

    def __rich_repr__(self):
        yield "option", self._option
        yield "values", tuple(self._values)


class Results:
    """
    Query surface for a finished parse.

    Every query accepts what the registry can resolve: an OptionSpec, a key
    string ("t", "Set-Text") or an identifier from the options mapping. All
    forms resolve to the same ReceivedArgument object. Identifiers are tried
    before key strings; the registry refuses an identifier spelled like
    another option's key.
    """

    def __init__(self, registry, /):
        if not isinstance(registry, OptionRegistry):
            raise TypeError("results registry must be an OptionRegistry")
        self._registry = registry
        self._received = {}

    @property
    def registry(self):
        return self._registry

    def _receive(self, option, /):
        """Return the option's ReceivedArgument, creating it on first use."""
        try:
            return self._received[option]
        except KeyError:
            received = self._received[option] = ReceivedArgument(option)
            return received

    def _adopt(self, received, /):
        self._received.setdefault(received.option, received)

    def result(self, object, /):
        """ReceivedArgument for the query, or None when it was not passed."""
        if (option := self._registry.resolve(object)) is None:
            return None
        return self._received.get(option)

    def is_passed(self, object, /):
        return self.result(object) is not None

    def short(self, key, /):
        """Lookup by short key only."""
        option = self._registry.lookup(key) if isinstance(key, str) and len(key) == 1 else None
        return self._received.get(option) if option is not None else None

    def long(self, key, /):
        """Lookup by long key only."""
        option = self._registry.lookup(key) if isinstance(key, str) and len(key) > 1 else None
        return self._received.get(option) if option is not None else None

    def identified(self, identifier, /):
        """Lookup by caller identifier only."""
        try:
            option = self._registry.identifiers.get(identifier)
        except TypeError:
            return None
        return self._received.get(option) if option is not None else None

    def is_short_passed(self, key, /):
        return self.short(key) is not None

    def is_long_passed(self, key, /):
        return self.long(key) is not None

    def __contains__(self, object):
        return self.is_passed(object)

    def __getitem__(self, object):
        if (received := self.result(object)) is None:
            raise KeyError(object)
        return received

    def __len__(self):
        return len(self._received)

    def __iter__(self):
        return iter(tuple(self._received.values()))

    def __repr__(self):
        return "results(%s)" % ", ".join(
            "%s=%r" % (received.option.long_key or received.option.short_key or "list", received.values)
            for received in self._received.values()
        )


__all__ = (
    "ReceivedArgument",
    "Results",
)
