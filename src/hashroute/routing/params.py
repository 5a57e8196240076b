"""Capture character classes.

Regex fragments for the two placeholder kinds of the pattern syntax.
"""

# Characters a capture may consume (ASCII word characters plus a few URL-safe marks)
SEGMENT_CHARS = r"\w\-.~%()"

# capture kind -> regex fragment
CAPTURES: dict[str, str] = {
    "named": rf"[{SEGMENT_CHARS}]+",
    "wildcard": rf"[{SEGMENT_CHARS}/]+",
}
