"""Escape-aware rewrites of regex patterns.

The ``regex`` engine has no switch for swapping quantifier greed or for
reading ``\\NNN`` as octal, so the ``U`` and ``o`` flags rewrite the
pattern text before compilation.
"""

import re

_BRACE_QUANTIFIER = re.compile(r"\{(?:\d+(?:,\d*)?|,\d+)\}")
_OCTAL_ESCAPE = re.compile(r"[0-7]{1,3}")


def _quantifier_end(pattern: str, index: int) -> int:
    """End index of the quantifier starting at ``index``, or 0 if none."""
    character = pattern[index]
    if character in "*+?":
        return index + 1
    if character == "{":
        match = _BRACE_QUANTIFIER.match(pattern, index)
        if match:
            return match.end()
    return 0


def _skip_ignored(pattern: str, index: int, verbose: bool) -> int:
    """Index of the next character that is not a comment or, in verbose mode, whitespace."""
    length = len(pattern)
    while index < length:
        if pattern.startswith("(?#", index):
            end = pattern.find(")", index)
            index = length if end < 0 else end + 1
        elif verbose and pattern[index].isspace():
            index += 1
        elif verbose and pattern[index] == "#":
            end = pattern.find("\n", index)
            index = length if end < 0 else end + 1
        else:
            break
    return index


def swap_greed(pattern: str, verbose: bool = False) -> str:
    """Make greedy quantifiers lazy and lazy quantifiers greedy.

    Escapes, character classes, ``(?#...)`` comments and ``(?`` group
    openers are skipped. With ``verbose``, whitespace and ``#`` comments
    are skipped too, including between a quantifier and its ``?``.
    Possessive quantifiers are kept as they are.
    """
    out = []
    index = 0
    length = len(pattern)
    in_class = False

    while index < length:
        character = pattern[index]

        if character == "\\":
            out.append(pattern[index:index + 2])
            index += 2
            continue

        if in_class:
            if character == "]":
                in_class = False
            out.append(character)
            index += 1
            continue

        skipped = _skip_ignored(pattern, index, verbose)
        if skipped > index:
            out.append(pattern[index:skipped])
            index = skipped
            continue

        if character == "[":
            in_class = True
            out.append(character)
            index += 1
            # A leading ']' (after an optional '^') is a literal.
            if pattern.startswith("^", index):
                out.append("^")
                index += 1
            if pattern.startswith("]", index):
                out.append("]")
                index += 1
            continue

        if pattern.startswith("(?", index):
            out.append("(?")
            index += 2
            continue

        end = _quantifier_end(pattern, index)
        if not end:
            out.append(character)
            index += 1
            continue

        out.append(pattern[index:end])
        index = end
        modifier = _skip_ignored(pattern, index, verbose)
        if pattern.startswith("?", modifier):
            out.append(pattern[index:modifier])
            index = modifier + 1
        elif pattern.startswith("+", modifier):
            out.append(pattern[index:modifier + 1])
            index = modifier + 1
        else:
            out.append("?")

    return "".join(out)


def expand_octal(pattern: str) -> str:
    """Replace ``\\N``, ``\\NN`` and ``\\NNN`` octal escapes by the character."""
    out = []
    index = 0
    length = len(pattern)

    while index < length:
        character = pattern[index]
        if character != "\\":
            out.append(character)
            index += 1
            continue

        match = _OCTAL_ESCAPE.match(pattern, index + 1)
        if match:
            out.append(re.escape(chr(int(match.group(), 8))))
            index = match.end()
        else:
            out.append(pattern[index:index + 2])
            index += 2

    return "".join(out)
