"""
Text transforms applied to catalog entries.

``invert_words`` reverses each word of a title while leaving spacing and
punctuation where they were::

    >>> invert_words("The Great Gatsby")
    'ehT taerG ybstaG'
    >>> invert_words("Catch-22, vol. 1")
    'hctaC-22, lov. 1'

A word is a maximal run of ASCII letters and digits; any other character,
including non-ASCII letters, is treated as a separator. The transform is
its own inverse.
"""

import re

WORD_PATTERN = re.compile(r"[A-Za-z0-9]+")


def invert_words(text: str) -> str:
    """Reverse every ASCII alphanumeric run in ``text``, keeping separators in place."""
    parts: list[str] = []
    position = 0

    for match in WORD_PATTERN.finditer(text):
        if match.start() > position:
            parts.append(text[position : match.start()])
        parts.append(match.group()[::-1])
        position = match.end()

    if position < len(text):
        parts.append(text[position:])

    return "".join(parts)
