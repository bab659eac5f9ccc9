"""
Utility functions for media-resolver.

This module provides the helpers shared by the YouTube and SoundCloud
extractors:
    - Safe nested lookup into loosely-typed JSON (dig, require)
    - Duration and count text parsing
    - Largest-image selection and width/height coercion

Usage:
    from media_resolver.utils import dig, require, parse_duration

    title = dig(renderer, "title", "runs", 0, "text", default="")
    video_id = require(renderer, "videoId", root="videoRenderer")
"""

import re
from typing import Any, Sequence

from media_resolver.core.exceptions import ParseError


_MISSING = object()

_NON_DIGITS = re.compile(r"[^0-9]")


def dig(data: Any, *path: str | int, default: Any = None) -> Any:
    """
    Follow a path of dict keys and list indexes, stopping at the first gap.

    String steps index into dicts, integer steps index into lists
    (negative indexes count from the end). Any missing key, out-of-range
    index, type mismatch or None along the way yields the default.

    Args:
        data: The JSON value to start from.
        *path: Sequence of keys and indexes.
        default: Value returned when the path cannot be followed.

    Returns:
        The value at the end of the path, or default.

    Examples:
        dig({"a": [{"b": 1}]}, "a", 0, "b")   # 1
        dig({"a": []}, "a", 0, "b")           # None
        dig({"a": None}, "a", "b", default=0) # 0
    """
    current = data
    for step in path:
        if isinstance(step, int) and not isinstance(step, bool):
            if not isinstance(current, list) or not -len(current) <= step < len(current):
                return default
            current = current[step]
        else:
            if not isinstance(current, dict) or step not in current:
                return default
            current = current[step]
        if current is None:
            return default
    return current


def require(data: Any, *path: str | int, root: str | None = None) -> Any:
    """
    Like dig(), but a gap in the path is a ParseError.

    Empty strings count as missing, so required ids and titles are
    guaranteed non-empty.

    Args:
        data: The JSON value to start from.
        *path: Sequence of keys and indexes.
        root: Optional name of data itself, prefixed to the path in
              the error message (e.g. "videoRenderer").

    Raises:
        ParseError: If the value is missing, None or an empty string.
    """
    value = dig(data, *path, default=_MISSING)
    if value is _MISSING or value == "":
        dotted = ".".join(str(step) for step in path)
        if root:
            dotted = f"{root}.{dotted}" if dotted else root
        raise ParseError(
            f"Missing required field '{dotted}'",
            details={"path": dotted}
        )
    return value


def parse_duration(duration_str: str | None) -> int:
    """
    Parse a clock-style duration string to seconds.

    Parts are read positionally: three parts are hours, minutes, seconds;
    two parts are minutes, seconds; one part is seconds.

    Args:
        duration_str: Duration like "1:02:03", "02:03" or "45".

    Returns:
        Duration in seconds, 0 for an empty or missing string.

    Raises:
        ParseError: If the value is not a string or a part is not an integer.

    Examples:
        parse_duration("1:02:03")  # 3723
        parse_duration("02:03")    # 123
        parse_duration("45")       # 45
        parse_duration(None)       # 0
    """
    if duration_str is None or duration_str == "":
        return 0
    if not isinstance(duration_str, str):
        raise ParseError(
            f"Duration text is not a string: {duration_str!r}",
            details={"value": duration_str}
        )

    try:
        parts = [int(p) for p in duration_str.strip().split(":")]
    except ValueError as e:
        raise ParseError(
            f"Invalid duration text: {duration_str!r}",
            details={"value": duration_str}
        ) from e

    if len(parts) == 3:
        return parts[0] * 3600 + parts[1] * 60 + parts[2]
    elif len(parts) == 2:
        return parts[0] * 60 + parts[1]
    else:
        return parts[0]


def parse_digits(text: str | None, default: int | None = None) -> int:
    """
    Strip every non-digit character and parse what remains.

    Args:
        text: Text like "1,234,567 views" or "42 videos".
        default: Value returned when text is missing or holds no digits.
                 If None, that case is a ParseError instead.

    Returns:
        The parsed integer.

    Raises:
        ParseError: If text is not a string, or no digits remain and no
                    default was given.

    Examples:
        parse_digits("1,234,567 views")    # 1234567
        parse_digits(None, default=0)      # 0
        parse_digits("No views", default=0)  # 0
    """
    if text is not None and not isinstance(text, str):
        raise ParseError(
            f"Count text is not a string: {text!r}",
            details={"value": text}
        )

    digits = _NON_DIGITS.sub("", text or "")
    if not digits:
        if default is not None:
            return default
        raise ParseError(
            f"No digits in count text: {text!r}",
            details={"value": text}
        )
    return int(digits)


def pick_largest(images: Sequence[dict[str, Any]] | None) -> dict[str, Any] | None:
    """
    Select the largest image from a list of {url, width, height} dicts.

    Images are compared by width * height. On a tie the later image wins,
    so a list that the source already sorts ascending gives its last
    element, and a list without dimensions also gives its last element.

    Args:
        images: Image descriptors as they appear in the source JSON.

    Returns:
        The selected image dict, or None for an empty or missing list.
    """
    if not images:
        return None

    best = None
    best_area = -1
    for image in images:
        if not isinstance(image, dict):
            continue
        area = as_int(image.get("width")) * as_int(image.get("height"))
        if area >= best_area:
            best = image
            best_area = area
    return best


def format_duration(seconds: int) -> str:
    """
    Format duration in seconds to human-readable string.

    Examples:
        format_duration(225)   # "3:45"
        format_duration(3750)  # "1:02:30"
        format_duration(45)    # "0:45"
    """
    if seconds < 3600:
        minutes = seconds // 60
        secs = seconds % 60
        return f"{minutes}:{secs:02d}"
    else:
        hours = seconds // 3600
        minutes = (seconds % 3600) // 60
        secs = seconds % 60
        return f"{hours}:{minutes:02d}:{secs:02d}"


def as_int(value: Any) -> int:
    """Coerce a width/height value (int or numeric string) to int, 0 if unusable."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return 0
