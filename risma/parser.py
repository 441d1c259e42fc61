"""
Structured parser for Risma placeholder tags.

Scanning, chain splitting and argument parsing are deterministic character
scans. Argument lists are parsed as literals only; nothing is executed.
"""

from __future__ import annotations

import ast
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .errors import ArgumentParseError, InvalidTokenSyntax

PLACEHOLDER = "$"
DIRECT_CALL = "@"

_TOKEN_RE = re.compile(r"^(@?)([A-Za-z0-9_]+)(?:\((.*)\))?$", re.DOTALL)
_KEYWORDS = {"true": True, "false": False, "null": None, "none": None}
_LITERAL_TYPES = (str, int, float)
_QUOTES = {'"', "'"}


@dataclass(frozen=True)
class Tag:
    """A ``{...}`` or ``!{...}`` span found in a template."""

    inner: str
    escaped: bool
    start: int
    end: int
    raw: str


@dataclass(frozen=True)
class Token:
    """One chain element, e.g. ``name``, ``name(args)`` or ``@name(args)``."""

    name: str
    args: Optional[str]
    direct: bool = False


def _match_braces(text: str) -> Dict[int, int]:
    """Map the index of every matched ``{`` to the index of its ``}``."""
    matches: Dict[int, int] = {}
    opened: List[int] = []
    for i, ch in enumerate(text):
        if ch == "{":
            opened.append(i)
        elif ch == "}" and opened:
            matches[opened.pop()] = i
    return matches


def find_tags(text: str) -> List[Tag]:
    """Find all top-level tags in source order.

    Braces are matched by depth so a tag whose arguments hold nested
    placeholders is returned whole. An unmatched ``{`` is left as text.
    """
    tags: List[Tag] = []
    matches = _match_braces(text)
    cursor = 0

    while cursor < len(text):
        if text[cursor] != "{":
            cursor += 1
            continue

        close_at = matches.get(cursor)
        if close_at is None:
            cursor += 1
            continue

        escaped = cursor > 0 and text[cursor - 1] == "!"
        start = cursor - 1 if escaped else cursor
        tags.append(
            Tag(
                inner=text[cursor + 1 : close_at].strip(),
                escaped=escaped,
                start=start,
                end=close_at + 1,
                raw=text[start : close_at + 1],
            )
        )
        cursor = close_at + 1

    return tags


def split_chain(text: str) -> List[str]:
    """Split a tag's inner text on dots outside of quotes and parentheses."""
    parts: List[str] = []
    buffer = ""
    depth = 0
    quote: Optional[str] = None

    for i, ch in enumerate(text):
        if ch in _QUOTES and (i == 0 or text[i - 1] != "\\"):
            if quote is None:
                quote = ch
            elif ch == quote:
                quote = None

        if quote is None:
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1

        if ch == "." and depth == 0 and quote is None:
            parts.append(buffer.strip())
            buffer = ""
        else:
            buffer += ch

    if buffer:
        parts.append(buffer.strip())

    return parts


def parse_token(token: str) -> Token:
    """Decompose a chain token into its name and raw argument text."""
    match = _TOKEN_RE.match(token)
    if not match:
        raise InvalidTokenSyntax(token)
    direct, name, args = match.groups()
    return Token(name=name, args=args, direct=bool(direct))


def _split_arguments(text: str, function: str) -> List[str]:
    items: List[str] = []
    buffer: List[str] = []
    quote: Optional[str] = None
    i = 0

    while i < len(text):
        ch = text[i]
        if quote is not None:
            buffer.append(ch)
            if ch == "\\" and i + 1 < len(text):
                buffer.append(text[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
            buffer.append(ch)
        elif ch == ",":
            items.append("".join(buffer).strip())
            buffer = []
        else:
            buffer.append(ch)
        i += 1

    if quote is not None:
        raise ArgumentParseError(function, "unterminated string")

    items.append("".join(buffer).strip())
    # a single trailing comma is allowed
    if len(items) > 1 and items[-1] == "":
        items.pop()
    return items


def _parse_literal(item: str, function: str) -> Any:
    if not item:
        raise ArgumentParseError(function, "empty argument")
    if item == PLACEHOLDER:
        return PLACEHOLDER

    keyword = item.lower()
    if keyword in _KEYWORDS:
        return _KEYWORDS[keyword]

    try:
        value = ast.literal_eval(item)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as exc:
        raise ArgumentParseError(function, f"not a literal: {item}") from exc

    if not isinstance(value, _LITERAL_TYPES):
        raise ArgumentParseError(function, f"unsupported literal: {item}")
    return value


def parse_arguments(text: Optional[str], function: str = "") -> List[Any]:
    """
    Parse a raw argument list into literal values.

    Args:
        text: Text between the call parentheses, with nested tags resolved
        function: Name of the called function, used in error messages

    Returns:
        Strings, numbers, booleans, ``None`` and the ``$`` marker in order
    """
    if text is None or not text.strip():
        return []
    return [_parse_literal(item, function) for item in _split_arguments(text, function)]


def is_valid_expression(text: str) -> bool:
    """Check whether a tag's inner text is syntactically valid.

    Argument lists holding nested tags are only checked for token shape,
    since their literal form is known after rendering.
    """
    try:
        for position, raw in enumerate(split_chain(text)):
            if position == 0 and not raw.startswith(DIRECT_CALL):
                continue
            token = parse_token(raw)
            if token.direct and position > 0:
                return False
            if token.args is not None and "{" not in token.args:
                parse_arguments(token.args, token.name)
    except (InvalidTokenSyntax, ArgumentParseError):
        return False
    return True
