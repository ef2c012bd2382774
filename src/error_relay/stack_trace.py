"""Best-effort source line extraction from free-form stack traces."""

import re

# Explicit marker first (".NET ':line 42'" or CPython '", line 42"'), then a bare ':42'.
# Alternation order decides ties at the same position; earliest position wins overall.
_LINE_NUMBER_RE = re.compile(r"(?::|,\s*)line\s+(\d+)|:(\d+)", re.IGNORECASE)


def extract_line_number(stack_trace: str | None) -> int | None:
    """Return the first source line number found in a stack trace.

    The trace format is not guaranteed, so the result may be wrong or
    missing for formats the pattern was not written against.

    Args:
        stack_trace: Stack trace text, possibly multi-line, empty or None.

    Returns:
        The line number, or None when nothing matches.

    Example:
        >>> extract_line_number("at Foo.Bar() in /src/Foo.cs:line 42")
        42
    """
    if not stack_trace:
        return None

    match = _LINE_NUMBER_RE.search(stack_trace)
    if match is None:
        return None

    digits = match.group(1) if match.group(1) is not None else match.group(2)
    return int(digits)
