"""
Argsmith help renderer: fixed-width, plain-text help built from declarations.

What this module provides
- render(metadata, options): a pure function returning the complete help text.
  The registry calls it exactly once and caches the result.

Layout (all measurements are monospace cells)
- Title box: full-width '=' rule, the display name centered between '='
  runs, full-width '=' rule.
- Description paragraph, then a "By {author}, version {version}." detail line.
- One block per option, each preceded by a blank line:
  • the reserved help-flags block always comes first,
  • declared options follow in declaration order,
  • the LIST option (if any) is always last, after an extra blank line.
- A block is a key column ("  -b, --Set-Background", padded to at least
  KEY_COLUMN_WIDTH) followed by info lines: wrapped description, a usage
  sentence and one example per key form, all indented to the key column.

Constraints
- The key column grows with long keys up to KEY_COLUMN_WIDTH + KEY_COLUMN_SLACK;
  wider keys are a configuration mistake (LongKeyOverflowError).
- Every line is newline-terminated; no line carries trailing spaces.
"""
from .faults import FaultCode, LongKeyOverflowError
from .specs import HELP_FLAGS, Usage
from .utils import wrap


LINE_WIDTH = 100
TITLE_MARGIN = 5
KEY_COLUMN_WIDTH = 40
KEY_COLUMN_SLACK = 10
LEFT_MARGIN = 2
KEY_GAP = 3

LIST_KEY = "[SPACE DELIMITED LIST]"
LIST_USAGE = "List, a space delimited list of values at the end of the command"
EXAMPLE_PREFIX = "Example: "
HELP_DESCRIPTION = "Use to print this help."

USAGES = {
    Usage.KEY: "Key",
    Usage.KEY_VALUE: "Key-value pair",
    Usage.LIST: LIST_USAGE,
}


def _title(name):
    """Framed, centered title box."""
    lines = ["=" * LINE_WIDTH]
    for line in wrap(name, LINE_WIDTH - TITLE_MARGIN * 2):
        left = (LINE_WIDTH - len(line)) // 2 - 1
        right = LINE_WIDTH - len(line) - 2 - left
        lines.append("=" * left + " " + line + " " + "=" * right)
    lines.append("=" * LINE_WIDTH)
    return lines


def _detail(author, version):
    """
    "By {author}, version {version}." with either part omittable.

    Returns "" when both are missing.
    """
    if author and version:
        return f"By {author}, version {version}."
    if author:
        return f"By {author}."
    if version:
        return f"Version {version}."
    return ""


def _key_column(option):
    """
    Key column text (unpadded) and its width.

    The width is at least KEY_COLUMN_WIDTH and includes KEY_GAP spaces after
    the keys.
    """
    margin = " " * LEFT_MARGIN
    if option.usage is Usage.LIST:
        keys = margin + LIST_KEY
    elif not option.long_key:
        keys = margin + "-" + option.short_key
    else:
        keys = margin + ("-%s, " % option.short_key if option.short_key else " " * len("-x, "))
        keys += "--" + option.long_key

    width = max(KEY_COLUMN_WIDTH, len(keys) + KEY_GAP)
    if width > KEY_COLUMN_WIDTH + KEY_COLUMN_SLACK:
        raise LongKeyOverflowError(
            "long key %r needs a %d cell help key column, at most %d are available" % (
                option.long_key, width, KEY_COLUMN_WIDTH + KEY_COLUMN_SLACK
            ),
            title="long key overflow",
            code=FaultCode.LONG_KEY_OVERFLOW,
            hint="shorten the long key",
            details=(("Argument option", option),),
        )
    return keys, width


def _usage(option):
    usage = "Usage: " + USAGES[option.usage]
    if option.repeatable:
        usage += ", Repeatable"
    if option.exclusive:
        usage += ", Exclusive"
    return usage + "."


def _examples(option, command):
    """One example sentence per key form (or the list form)."""
    gap = " " if option.exclusive else " ... "
    prefix = EXAMPLE_PREFIX + command + gap

    if option.usage is Usage.LIST:
        return [prefix + option.list_example]

    examples = []
    if option.short_key:
        example = prefix + "-" + option.short_key
        if option.usage is Usage.KEY_VALUE:
            example += " " + option.short_example
        examples.append(example + gap)
    if option.long_key:
        example = prefix + "--" + option.long_key
        if option.usage is Usage.KEY_VALUE:
            example += "=" + option.long_example
        examples.append(example + gap)
    return examples


def _block(keys, width, sentences):
    """
    Merge the key column with wrapped info sentences.

    The first info line follows the padded key column; every further line is
    indented to the same column.
    """
    lines = []
    for sentence in sentences:
        lines.extend(wrap(sentence, LINE_WIDTH - width))
    if not lines:
        return [keys]
    return [keys.ljust(width) + lines[0]] + [" " * width + line for line in lines[1:]]


def _help_block(command):
    keys = " " * LEFT_MARGIN + ", ".join(HELP_FLAGS)
    return _block(keys, KEY_COLUMN_WIDTH, [HELP_DESCRIPTION, EXAMPLE_PREFIX + command + " " + HELP_FLAGS[0]])


def _option_block(option, command):
    keys, width = _key_column(option)
    sentences = [option.description] if option.description else []
    sentences.append(_usage(option))
    sentences.extend(_examples(option, command))
    return _block(keys, width, sentences)


def render(metadata, options, /):
    """
    Render the help text for a program and its options.

    Parameters
    - metadata: ProgramMetadata, provides the title, description, detail line
      and the command used in examples.
    - options: iterable of OptionSpec in declaration order; at most one may be
      a LIST (the registry guarantees it).

    Returns
    - str: newline-terminated lines, LINE_WIDTH cells wide at most (wider only
      when a single word cannot be wrapped).

    Raises
    - LongKeyOverflowError: a long key does not fit the widest key column.
    """
    lines = _title(metadata.name)
    if metadata.description:
        lines.extend(wrap(metadata.description, LINE_WIDTH))
    if detail := _detail(metadata.author, metadata.version):
        lines.extend(wrap(detail, LINE_WIDTH))

    lines.append("")
    lines.extend(_help_block(metadata.command))

    listing = None
    for option in options:
        if option.usage is Usage.LIST:
            listing = option
            continue
        lines.append("")
        lines.extend(_option_block(option, metadata.command))

    if listing is not None:
        lines.extend(("", ""))
        lines.extend(_option_block(listing, metadata.command))

    return "".join(line + "\n" for line in lines)


__all__ = (
    "render",
    "LINE_WIDTH",
    "KEY_COLUMN_WIDTH",
)
