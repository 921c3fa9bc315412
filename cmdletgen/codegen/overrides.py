"""Literal text substitution applied to generated source files."""

import re
from collections.abc import Mapping


def _pattern(keys: list[str], whole_identifier: bool) -> re.Pattern[str]:
    alternation = '|'.join(re.escape(key) for key in keys)
    if whole_identifier:
        return re.compile(rf'(?<![\w.])(?:{alternation})(?!\.?\w)')
    return re.compile(alternation)


def rewrite_overrides(
    text: str, overrides: Mapping[str, str], whole_identifier: bool = False
) -> str:
    """Replace every override key in ``text`` with its value.

    The text is scanned once from left to right. At each position the first
    key in the mapping's order that matches is replaced, and scanning resumes
    after the match, so replacement text is never rewritten again. Put longer
    keys before their prefixes ('Carbon.Json.Parser' before 'Carbon.Json').

    Args:
        text: Source text.
        overrides: Key to replacement, in priority order.
        whole_identifier: Only replace keys that are not part of a longer
            dotted identifier.

    Example:
        >>> rewrite_overrides('using Foo.Bar;', {'Foo.Bar': 'Baz.Qux'})
        'using Baz.Qux;'
    """
    keys = [key for key in overrides if key]
    if not keys or not text:
        return text
    return _pattern(keys, whole_identifier).sub(
        lambda match: overrides[match.group(0)], text
    )
