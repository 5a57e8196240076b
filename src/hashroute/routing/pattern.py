"""Pattern compiler — route pattern strings to compiled matchers.

A pattern is literal text interleaved with placeholders::

    "/pages/:key/*rest" -> (Literal("/pages/"), Named("key"), Literal("/"), Wildcard("rest"))

``:name`` captures within one path segment, ``*name`` may span several.
Patterns are compiled once, at registration, and matched against the
whole path.
"""

import re
from dataclasses import dataclass
from typing import ClassVar, TypeAlias

from hashroute.errors import PatternCompileError
from hashroute.routing.params import CAPTURES

_PLACEHOLDER_RE = re.compile(r"([:*])(\w+)", re.ASCII)

# The empty pattern denotes the root: it matches "" and "/".
_ROOT_REGEX = "/?"


@dataclass(frozen=True, slots=True)
class Literal:
    """Text matched verbatim."""

    text: str

    @property
    def regex(self) -> str:
        return re.escape(self.text)


@dataclass(frozen=True, slots=True)
class Named:
    """``:name`` — one or more characters, never crossing ``/``."""

    kind: ClassVar[str] = "named"
    name: str

    @property
    def regex(self) -> str:
        return f"({CAPTURES[self.kind]})"


@dataclass(frozen=True, slots=True)
class Wildcard:
    """``*name`` — one or more characters, ``/`` included."""

    kind: ClassVar[str] = "wildcard"
    name: str

    @property
    def regex(self) -> str:
        return f"({CAPTURES[self.kind]})"


Segment: TypeAlias = Literal | Named | Wildcard

_PLACEHOLDER_TYPES: dict[str, type[Named] | type[Wildcard]] = {":": Named, "*": Wildcard}


def parse_pattern(pattern: str) -> tuple[Segment, ...]:
    """Parse a pattern string into its segment tokens.

    Examples::

        "/home"              -> (Literal("/home"),)
        "/pages/:key/"       -> (Literal("/pages/"), Named("key"), Literal("/"))
        "/bobby/*a/*b"       -> (Literal("/bobby/"), Wildcard("a"), Literal("/"), Wildcard("b"))

    A ``:`` or ``*`` that is not followed by a name character is literal.

    Raises ``PatternCompileError`` when two placeholders share a name.
    """
    segments: list[Segment] = []
    seen: set[str] = set()
    pos = 0
    for found in _PLACEHOLDER_RE.finditer(pattern):
        if found.start() > pos:
            segments.append(Literal(pattern[pos : found.start()]))
        sigil, name = found.groups()
        if name in seen:
            raise PatternCompileError(pattern, f"duplicate capture name {name!r}")
        seen.add(name)
        segments.append(_PLACEHOLDER_TYPES[sigil](name))
        pos = found.end()
    if pos < len(pattern):
        segments.append(Literal(pattern[pos:]))
    return tuple(segments)


@dataclass(frozen=True, slots=True)
class CompiledPattern:
    """A pattern compiled to a full-string regex.

    Captures are positional groups mapped back to ``names``, so any
    ``\\w+`` name works even where it is not a valid regex group name.
    """

    pattern: str
    segments: tuple[Segment, ...]
    regex: re.Pattern[str]
    names: tuple[str, ...]

    def match(self, path: str) -> dict[str, str] | None:
        """Return the captures for *path*, or ``None`` if it does not match.

        A pattern without placeholders returns ``{}`` on success.
        """
        found = self.regex.fullmatch(path)
        if found is None:
            return None
        return dict(zip(self.names, found.groups(), strict=True))


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile *pattern* into a ``CompiledPattern``.

    Adjacent wildcards split the way a backtracking regex does: the
    leftmost takes as much as it can, the ones after it the minimum the
    rest of the pattern allows.

    Raises ``PatternCompileError`` for malformed patterns.
    """
    segments = parse_pattern(pattern)
    source = "".join(segment.regex for segment in segments) if segments else _ROOT_REGEX
    try:
        regex = re.compile(source, re.ASCII)
    except re.error as exc:
        raise PatternCompileError(pattern, str(exc)) from exc
    names = tuple(segment.name for segment in segments if not isinstance(segment, Literal))
    return CompiledPattern(pattern=pattern, segments=segments, regex=regex, names=names)
