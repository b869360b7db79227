"""
Argsmith option registry: validate declarations once, index them for parsing.

Responsibilities
- Check every OptionSpec against the registry-wide rules, in order:
  1. a short or long key is required (unless the usage is LIST),
  2. a long key is empty or at least two characters,
  3. the usage is set,
  4. no key is shared with an already registered spec,
  5. at most one LIST spec.
  Every violation is a ConfigurationError naming the offending spec(s).
- Build one namespace mapping each short-key and long-key string to its spec.
- Keep the caller's identifier → spec table when options come as a mapping
  (e.g. {Colour.TEXT: text_spec, ...} or an Enum turned into a dict).
- Render the help text once; it never changes for the registry's lifetime.

The registry is read-only once built and can be shared by any number of
sequential parses.
"""
import logging
from collections.abc import Iterable, Mapping

from .faults import *
from .rendering import render
from .specs import OptionSpec, ProgramMetadata, Usage
from .utils import mirror

logger = logging.getLogger(__name__)


class OptionRegistry:
    """
    Validated, indexed set of OptionSpecs plus the pre-rendered help.

    Parameters
    - metadata: ProgramMetadata, command must be non-empty.
    - options: Iterable[OptionSpec] | Mapping[identifier, OptionSpec]
      When a mapping is given, its keys become lookup identifiers for results.

    Raises
    - TypeError: metadata or an option has the wrong type.
    - ConfigurationError (subclasses): any declaration rule is broken, or a
      long key does not fit the help layout.
    """

    def __init__(self, metadata, options, /):
        if not isinstance(metadata, ProgramMetadata):
            raise TypeError("registry metadata must be a ProgramMetadata")
        if not metadata.command:
            raise MissingCommandError(
                "the command name (the mnemonic used to call the program) must be set",
                title="missing command name",
                code=FaultCode.MISSING_COMMAND,
                hint="pass a non-empty command to ProgramMetadata",
            )

        if isinstance(options, Mapping):
            identifiers = dict(options)
            options = list(identifiers.values())
        elif isinstance(options, Iterable) and not isinstance(options, str):
            identifiers = {}
            options = list(options)
        else:
            raise TypeError("registry options must be an iterable or a mapping of OptionSpec")

        self._metadata = metadata
        self._options = []
        self._keys = {}
        self._listing = None

        for option in options:
            if not isinstance(option, OptionSpec):
                raise TypeError("registry options must be OptionSpec instances, not %s" % type(option).__name__)
            self._validate(option)
            self._index(option)

        for identifier, option in identifiers.items():
            self._shadowing(identifier, option)
        self._identifiers = identifiers
        self._help = render(metadata, self._options)

        logger.debug(
            "registry for %r built: %d option(s), %d key(s), list=%s",
            metadata.command, len(self._options), len(self._keys), self._listing is not None,
        )

    def _validate(self, option):
        if not option.short_key and not option.long_key and option.usage is not Usage.LIST:
            raise MissingKeysError(
                "neither a short nor a long key has been provided for an argument option",
                title="missing keys",
                code=FaultCode.MISSING_KEYS,
                hint="set short_key and/or long_key (only a LIST option may omit both)",
                details=(("Argument option", option),),
            )

        if len(option.long_key) == 1:
            raise ShortLongKeyError(
                "long keys should be at least 2 characters long",
                title="long key too short",
                code=FaultCode.SHORT_LONG_KEY,
                hint="use short_key for single characters",
                details=(("Argument option", option),),
            )

        if not isinstance(option.usage, Usage):
            raise MissingUsageError(
                "the usage of an argument option must be set",
                title="missing usage",
                code=FaultCode.MISSING_USAGE,
                hint="pass usage=Usage.KEY, Usage.KEY_VALUE or Usage.LIST",
                details=(("Argument option", option),),
            )

        short = self._keys.get(option.short_key) if option.short_key else None
        long = self._keys.get(option.long_key) if option.long_key else None
        if short or long:
            if short and long:
                message = "arguments share a short and long key"
                details = (("Option in conflict", option), ("Short key", short), ("Long key", long))
            elif short:
                message = "arguments share a short key"
                details = (("Option in conflict", option), ("Short key", short))
            else:
                message = "arguments share a long key"
                details = (("Option in conflict", option), ("Long key", long))
            raise DuplicatedKeyError(
                message,
                title="duplicated key",
                code=FaultCode.DUPLICATED_KEY,
                hint="every key must belong to exactly one option",
                details=details,
            )

        if option.usage is Usage.LIST and self._listing is not None:
            raise MultipleListsError(
                "more than one list argument has been set",
                title="multiple lists",
                code=FaultCode.MULTIPLE_LISTS,
                hint="keep a single LIST option; it collects every trailing value",
                details=(("Option 1", self._listing), ("Option 2", option)),
            )

    def _shadowing(self, identifier, option):
        """Identifiers resolve before key strings; one may not hide another option's key."""
        if not isinstance(identifier, str):
            return
        if (owner := self._keys.get(identifier)) is not None and owner is not option:
            raise DuplicatedKeyError(
                "identifier %r is also a key of another argument option" % identifier,
                title="shadowed key",
                code=FaultCode.DUPLICATED_KEY,
                hint="rename the identifier; queries by %r would never reach the key" % identifier,
                details=(("Identified option", option), ("Key owner", owner)),
            )

    def _index(self, option):
        self._options.append(option)
        for key in option.keys:
            self._keys[key] = option
        if option.usage is Usage.LIST:
            self._listing = option

    @property
    def metadata(self):
        return self._metadata

    @property
    def options(self):
        """Registered specs in declaration order."""
        return tuple(self._options)

    # Read-only views: key string → spec, identifier → spec.
    keys = mirror("keys")
    identifiers = mirror("identifiers")

    @property
    def listing(self):
        """The LIST spec, or None when no positional list is declared."""
        return self._listing

    @property
    def help(self):
        return self._help

    def lookup(self, key, /):
        """Spec owning the key string, or None."""
        return self._keys.get(key)

    def resolve(self, object, /):
        """
        Map a query object to its registered spec.

        Accepted forms, tried in order
        - an OptionSpec registered here (identity),
        - a caller identifier from the options mapping,
        - a key string: one character is a short key, anything longer a long key.

        Returns None when nothing matches (including unhashable objects).
        """
        if isinstance(object, OptionSpec):
            return object if object in self._options else None
        try:
            return self._identifiers[object]
        except KeyError:
            pass
        except TypeError:
            return None
        if isinstance(object, str):
            return self.lookup(object)
        return None

    def __contains__(self, object):
        return self.resolve(object) is not None

    def __len__(self):
        return len(self._options)

    def __iter__(self):
        return iter(tuple(self._options))

    def __repr__(self):
        return "option-registry(command=%r, options=%d)" % (self._metadata.command, len(self._options))


def build(metadata, options, /):
    """
    Validate and index the declarations; see OptionRegistry.
    """
    return OptionRegistry(metadata, options)


__all__ = (
    "OptionRegistry",
    "build",
)
