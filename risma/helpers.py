"""Global functions reachable from templates.

This is the last resolver tier. Only the names listed in ``__all__`` are
exposed, so templates can never reach arbitrary Python callables. Every
helper is free of side effects and accepts the piped value as its first
argument unless noted otherwise.
"""

from __future__ import annotations

import calendar
import html
import json
import re
import time
from collections.abc import Iterable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Optional

__all__ = [
    "strtoupper",
    "strtolower",
    "ucfirst",
    "lcfirst",
    "ucwords",
    "trim",
    "ltrim",
    "rtrim",
    "str_replace",
    "str_repeat",
    "str_pad",
    "strrev",
    "strlen",
    "substr",
    "number_format",
    "date",
    "nl2br",
    "htmlspecialchars",
    "sprintf",
    "implode",
    "explode",
    "json_encode",
    "upper",
    "lower",
    "title",
    "capitalize",
    "strip",
    "replace",
    "length",
    "default",
    "slugify",
]


def stringify(value: Any) -> str:
    """Render a value as template output text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else ""
    return str(value)


def strtoupper(value: Any) -> str:
    return stringify(value).upper()


def strtolower(value: Any) -> str:
    return stringify(value).lower()


def ucfirst(value: Any) -> str:
    text = stringify(value)
    return text[:1].upper() + text[1:]


def lcfirst(value: Any) -> str:
    text = stringify(value)
    return text[:1].lower() + text[1:]


def ucwords(value: Any) -> str:
    return re.sub(r"(^|\s)(\S)", lambda m: m.group(1) + m.group(2).upper(), stringify(value))


def trim(value: Any, characters: Optional[str] = None) -> str:
    return stringify(value).strip(characters)


def ltrim(value: Any, characters: Optional[str] = None) -> str:
    return stringify(value).lstrip(characters)


def rtrim(value: Any, characters: Optional[str] = None) -> str:
    return stringify(value).rstrip(characters)


def str_replace(search: Any, replacement: Any, subject: Any) -> str:
    """Replace every *search* in *subject*. Use ``$`` to pipe the subject."""
    return stringify(subject).replace(stringify(search), stringify(replacement))


def str_repeat(value: Any, times: int) -> str:
    return stringify(value) * int(times)


def str_pad(value: Any, length: int, pad: str = " ", side: str = "right") -> str:
    text = stringify(value)
    missing = int(length) - len(text)
    if missing <= 0 or not pad:
        return text
    if side == "left":
        return (pad * missing)[:missing] + text
    if side == "both":
        left = missing // 2
        right = missing - left
        return (pad * left)[:left] + text + (pad * right)[:right]
    return text + (pad * missing)[:missing]


def strrev(value: Any) -> str:
    return stringify(value)[::-1]


def strlen(value: Any) -> int:
    return len(stringify(value))


def substr(value: Any, start: int, length: Optional[int] = None) -> str:
    text = stringify(value)[int(start):]
    if length is None:
        return text
    return text[: int(length)]


def number_format(
    number: Any, decimals: int = 0, dec_point: str = ".", thousands_sep: str = ","
) -> str:
    """Format a number with grouped thousands, rounding half away from zero."""
    decimals = max(int(decimals), 0)
    quantum = Decimal(1).scaleb(-decimals)
    rounded = Decimal(str(number)).quantize(quantum, rounding=ROUND_HALF_UP)

    integer, _, fraction = f"{abs(rounded):,.{decimals}f}".partition(".")
    result = integer.replace(",", thousands_sep)
    if fraction:
        result = f"{result}{dec_point}{fraction}"
    if rounded < 0:
        result = f"-{result}"
    return result


_DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
_MONTH_NAMES = [
    "",
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def _hour12(moment: datetime) -> int:
    return moment.hour % 12 or 12


_DATE_FORMATS: Dict[str, Callable[[datetime], str]] = {
    "d": lambda m: f"{m.day:02d}",
    "D": lambda m: _DAY_NAMES[m.weekday()][:3],
    "j": lambda m: str(m.day),
    "l": lambda m: _DAY_NAMES[m.weekday()],
    "N": lambda m: str(m.isoweekday()),
    "w": lambda m: str(m.isoweekday() % 7),
    "z": lambda m: str(m.timetuple().tm_yday - 1),
    "m": lambda m: f"{m.month:02d}",
    "M": lambda m: _MONTH_NAMES[m.month][:3],
    "n": lambda m: str(m.month),
    "F": lambda m: _MONTH_NAMES[m.month],
    "t": lambda m: str(calendar.monthrange(m.year, m.month)[1]),
    "L": lambda m: "1" if calendar.isleap(m.year) else "0",
    "Y": lambda m: str(m.year),
    "y": lambda m: f"{m.year % 100:02d}",
    "a": lambda m: "am" if m.hour < 12 else "pm",
    "A": lambda m: "AM" if m.hour < 12 else "PM",
    "g": lambda m: str(_hour12(m)),
    "G": lambda m: str(m.hour),
    "h": lambda m: f"{_hour12(m):02d}",
    "H": lambda m: f"{m.hour:02d}",
    "i": lambda m: f"{m.minute:02d}",
    "s": lambda m: f"{m.second:02d}",
    "U": lambda m: str(int(m.timestamp())),
    "e": lambda m: m.tzname() or "",
    "T": lambda m: m.tzname() or "",
}


def date(format: str, timestamp: Optional[float] = None) -> str:
    """Format a Unix timestamp (default: now) with PHP-style format characters.

    A backslash makes the following character literal.
    """
    moment = datetime.fromtimestamp(time.time() if timestamp is None else float(timestamp))
    moment = moment.astimezone()
    out: List[str] = []
    i = 0
    while i < len(format):
        ch = format[i]
        if ch == "\\" and i + 1 < len(format):
            out.append(format[i + 1])
            i += 2
            continue
        handler = _DATE_FORMATS.get(ch)
        out.append(handler(moment) if handler else ch)
        i += 1
    return "".join(out)


def nl2br(value: Any) -> str:
    return re.sub(r"(\r\n|\n|\r)", r"<br />\1", stringify(value))


def htmlspecialchars(value: Any) -> str:
    return html.escape(stringify(value), quote=True)


def sprintf(format: Any, *args: Any) -> str:
    return stringify(format) % args


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, dict))


def implode(separator: Any, pieces: Any) -> str:
    """Join *pieces* with *separator*; either argument order is accepted."""
    if _is_sequence(separator) and not _is_sequence(pieces):
        separator, pieces = pieces, separator
    if not _is_sequence(pieces):
        return stringify(pieces)
    return stringify(separator).join(stringify(piece) for piece in pieces)


def explode(separator: Any, value: Any) -> List[str]:
    separator = stringify(separator)
    if not separator:
        raise ValueError("explode() separator cannot be empty")
    return stringify(value).split(separator)


def json_encode(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


def upper(value: Any) -> str:
    return stringify(value).upper()


def lower(value: Any) -> str:
    return stringify(value).lower()


def title(value: Any) -> str:
    return stringify(value).title()


def capitalize(value: Any) -> str:
    return stringify(value).capitalize()


def strip(value: Any, characters: Optional[str] = None) -> str:
    return stringify(value).strip(characters)


def replace(value: Any, old: Any, new: Any) -> str:
    return stringify(value).replace(stringify(old), stringify(new))


def length(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, str) or _is_sequence(value) or isinstance(value, dict):
        return len(value)
    return len(stringify(value))


def default(value: Any, fallback: Any = "") -> Any:
    return fallback if value is None or value == "" else value


def slugify(value: Any, separator: str = "-") -> str:
    text = re.sub(r"[^a-z0-9]+", separator, stringify(value).lower())
    return text.strip(separator)


GLOBAL_FUNCTIONS = MappingProxyType({name: globals()[name] for name in __all__})
