"""Grapheme clustering over character scanners.

Clustering always takes an explicit strategy. A strategy answers one
question: given the cluster built so far and the next code point, is there
a boundary between them? The engine pulls characters one at a time and
never holds more than ``strategy.max_cluster_length`` of them; a cluster
that reaches that bound is closed regardless of the strategy's answer.
"""

from __future__ import annotations

import unicodedata
from collections.abc import Callable, Sequence
from enum import Enum, auto
from functools import lru_cache
from typing import Protocol

from symtext.codec import CharacterSymbol
from symtext.scanner import SequenceScanner, TextScanner
from symtext.text import StringValue

Character = CharacterSymbol | str


class ClusterStrategy(Protocol):
    """Decides where grapheme boundaries fall."""

    name: str
    max_cluster_length: int

    def is_boundary(self, cluster: Sequence[int], next_cp: int) -> bool:
        """Return True if a cluster ending in *cluster* breaks before next_cp."""
        ...


class Cluster:
    """One grapheme cluster: a non-empty run of characters from a scan."""

    __slots__ = ("_chars",)

    def __init__(self, chars: Sequence[Character]) -> None:
        if not chars:
            raise ValueError("a cluster holds at least one character")
        self._chars = tuple(chars)

    def characters(self) -> SequenceScanner[Character]:
        """Return a scanner over the characters of this cluster."""
        return SequenceScanner(self._chars)

    def code_points(self) -> tuple[int, ...]:
        return tuple(_code_point(ch) for ch in self._chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cluster):
            return NotImplemented
        return self.code_points() == other.code_points()

    def __hash__(self) -> int:
        return hash(self.code_points())

    def __str__(self) -> str:
        return "".join(map(chr, self.code_points()))

    def __repr__(self) -> str:
        return f"Cluster({str(self)!r})"


def _code_point(ch: Character) -> int:
    if isinstance(ch, CharacterSymbol):
        return ch.code_point
    return ord(ch)


class ClusterScanner(TextScanner[Cluster]):
    """Scanner yielding the clusters of a character scanner, in order."""

    def __init__(self, chars: TextScanner[Character], strategy: ClusterStrategy) -> None:
        self._chars = chars
        self._strategy = strategy
        self._limit = max(1, strategy.max_cluster_length)
        self._pending: Cluster | None = None

    def _next_cluster(self) -> Cluster | None:
        first = self._chars.advance()
        if first is None:
            return None
        chars = [first]
        cps = [_code_point(first)]
        while len(chars) < self._limit:
            ch = self._chars.peek()
            if ch is None:
                break
            cp = _code_point(ch)
            if self._strategy.is_boundary(cps, cp):
                break
            chars.append(self._chars.advance())
            cps.append(cp)
        return Cluster(chars)

    def peek(self) -> Cluster | None:
        if self._pending is None:
            self._pending = self._next_cluster()
        return self._pending

    def advance(self) -> Cluster | None:
        item = self.peek()
        self._pending = None
        return item


def cluster(chars: TextScanner[Character], strategy: ClusterStrategy) -> ClusterScanner:
    """Group a character scanner into grapheme clusters under strategy."""
    if strategy is None:
        raise TypeError("a clustering strategy is required")
    return ClusterScanner(chars, strategy)


def clusters_of(string: StringValue, strategy: ClusterStrategy) -> ClusterScanner:
    """Return a scanner over the grapheme clusters of string."""
    return cluster(string.characters(), strategy)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


class CodePointStrategy:
    """Every code point is a cluster of its own."""

    name = "codepoint"
    max_cluster_length = 1

    def is_boundary(self, cluster: Sequence[int], next_cp: int) -> bool:
        return True


class GraphemeBreak(Enum):
    """Grapheme_Cluster_Break property values used by the boundary rules."""

    OTHER = auto()
    CR = auto()
    LF = auto()
    CONTROL = auto()
    EXTEND = auto()
    ZWJ = auto()
    REGIONAL_INDICATOR = auto()
    PREPEND = auto()
    SPACING_MARK = auto()
    L = auto()
    V = auto()
    T = auto()
    LV = auto()
    LVT = auto()


_PREPEND = frozenset(
    [*range(0x0600, 0x0606), 0x06DD, 0x070F, 0x0890, 0x0891, 0x08E2, 0x0D4E]
    + [0x110BD, 0x110CD, 0x111C2, 0x111C3]
)

# Marks whose property does not follow their general category
_EXTEND_EXTRA = frozenset(
    [0x09BE, 0x09D7, 0x0B3E, 0x0B57, 0x0BBE, 0x0BD7, 0x0CC2, 0x0CD5, 0x0CD6]
    + [0x0D3E, 0x0D57, 0x0DCF, 0x0DDF, 0x1B35, 0x302E, 0x302F, 0xFF9E, 0xFF9F]
    + [0x1133E, 0x11357, 0x114B0, 0x114BD, 0x115AF, 0x11930, 0x1D165]
    + [*range(0x1D16E, 0x1D173)]
)
_SPACING_MARK_EXTRA = frozenset([0x0E33, 0x0EB3])
_NOT_SPACING_MARK = frozenset(
    [0x102B, 0x102C, 0x1038, *range(0x1062, 0x1065), *range(0x1067, 0x106E)]
    + [0x1083, *range(0x1087, 0x108D), 0x108F, *range(0x109A, 0x109D)]
    + [0x1A61, 0x1A63, 0x1A64, 0xAA7B, 0xAA7D, 0x11720, 0x11721]
)

# Indic_Conjunct_Break values for the scripts Unicode 15.1 assigns them to
_CONJUNCT_LINKERS = frozenset([0x094D, 0x09CD, 0x0ACD, 0x0B4D, 0x0C4D, 0x0D4D])
_CONJUNCT_CONSONANT_RANGES = (
    (0x0915, 0x0939),
    (0x0958, 0x095F),
    (0x0978, 0x097F),
    (0x0995, 0x09A8),
    (0x09AA, 0x09B0),
    (0x09B2, 0x09B2),
    (0x09B6, 0x09B9),
    (0x09DC, 0x09DD),
    (0x09DF, 0x09DF),
    (0x09F0, 0x09F1),
    (0x0A95, 0x0AA8),
    (0x0AAA, 0x0AB0),
    (0x0AB2, 0x0AB3),
    (0x0AB5, 0x0AB9),
    (0x0AF9, 0x0AF9),
    (0x0B15, 0x0B28),
    (0x0B2A, 0x0B30),
    (0x0B32, 0x0B33),
    (0x0B35, 0x0B39),
    (0x0B5C, 0x0B5D),
    (0x0B5F, 0x0B5F),
    (0x0B71, 0x0B71),
    (0x0C15, 0x0C28),
    (0x0C2A, 0x0C39),
    (0x0C58, 0x0C5A),
    (0x0D15, 0x0D3A),
)

_PICTOGRAPHIC_RANGES = (
    (0x2194, 0x2199),
    (0x2300, 0x23FF),
    (0x2600, 0x27BF),
    (0x2B00, 0x2BFF),
    (0x1F000, 0x1FAFF),
    (0x1FC00, 0x1FFFD),
)
_PICTOGRAPHIC = frozenset(
    [0x00A9, 0x00AE, 0x203C, 0x2049, 0x2122, 0x2139, 0x21A9, 0x21AA, 0x3030, 0x303D]
    + [0x3297, 0x3299]
)

_HANGUL_BASE = 0xAC00
_HANGUL_LAST = 0xD7A3
_HANGUL_T_COUNT = 28


@lru_cache(maxsize=4096)
def grapheme_break(cp: int) -> GraphemeBreak:
    """Return the Grapheme_Cluster_Break value of cp.

    Derived from general categories plus fixed ranges and the exception
    tables above.
    """
    if cp == 0x0D:
        return GraphemeBreak.CR
    if cp == 0x0A:
        return GraphemeBreak.LF
    if cp == 0x200D:
        return GraphemeBreak.ZWJ
    if 0x1F1E6 <= cp <= 0x1F1FF:
        return GraphemeBreak.REGIONAL_INDICATOR
    if cp in _PREPEND:
        return GraphemeBreak.PREPEND
    if cp in _EXTEND_EXTRA:
        return GraphemeBreak.EXTEND
    if cp in _SPACING_MARK_EXTRA:
        return GraphemeBreak.SPACING_MARK

    if 0x1100 <= cp <= 0x115F or 0xA960 <= cp <= 0xA97C:
        return GraphemeBreak.L
    if 0x1160 <= cp <= 0x11A7 or 0xD7B0 <= cp <= 0xD7C6:
        return GraphemeBreak.V
    if 0x11A8 <= cp <= 0x11FF or 0xD7CB <= cp <= 0xD7FB:
        return GraphemeBreak.T
    if _HANGUL_BASE <= cp <= _HANGUL_LAST:
        if (cp - _HANGUL_BASE) % _HANGUL_T_COUNT == 0:
            return GraphemeBreak.LV
        return GraphemeBreak.LVT

    # ZWNJ, emoji modifiers, tag characters
    if cp == 0x200C or 0x1F3FB <= cp <= 0x1F3FF or 0xE0020 <= cp <= 0xE007F:
        return GraphemeBreak.EXTEND

    category = unicodedata.category(chr(cp))
    if category in ("Mn", "Me"):
        return GraphemeBreak.EXTEND
    if category == "Mc" and cp not in _NOT_SPACING_MARK:
        return GraphemeBreak.SPACING_MARK
    if category in ("Cc", "Cf", "Zl", "Zp", "Cs"):
        return GraphemeBreak.CONTROL
    return GraphemeBreak.OTHER


def is_extended_pictographic(cp: int) -> bool:
    if 0x1F1E6 <= cp <= 0x1F1FF or 0x1F3FB <= cp <= 0x1F3FF:
        return False
    if cp in _PICTOGRAPHIC:
        return True
    return any(low <= cp <= high for low, high in _PICTOGRAPHIC_RANGES)


def is_conjunct_consonant(cp: int) -> bool:
    return any(low <= cp <= high for low, high in _CONJUNCT_CONSONANT_RANGES)


def _links_to_consonant(cluster: Sequence[int]) -> bool:
    """True if cluster ends in consonant [Extend Linker]* with at least one linker."""
    linked = False
    for cp in reversed(cluster):
        if cp in _CONJUNCT_LINKERS:
            linked = True
        elif grapheme_break(cp) in (GraphemeBreak.EXTEND, GraphemeBreak.ZWJ):
            continue
        else:
            return linked and is_conjunct_consonant(cp)
    return False


_BREAKS_AROUND = (GraphemeBreak.CONTROL, GraphemeBreak.CR, GraphemeBreak.LF)


class GraphemeStrategy:
    """Unicode grapheme clusters (UAX #29, rules GB3 to GB13 of Unicode 15.1).

    GB9c conjunct linking covers the Devanagari, Bengali, Gujarati, Oriya,
    Telugu and Malayalam consonants. ``legacy=True`` gives legacy clusters,
    which drop GB9a, GB9b and GB9c.
    """

    def __init__(self, *, legacy: bool = False, max_cluster_length: int = 64) -> None:
        self.legacy = legacy
        self.name = "legacy" if legacy else "extended"
        self.max_cluster_length = max_cluster_length

    def __repr__(self) -> str:
        return f"GraphemeStrategy(name={self.name!r})"

    def is_boundary(self, cluster: Sequence[int], next_cp: int) -> bool:
        prev = grapheme_break(cluster[-1])
        nxt = grapheme_break(next_cp)

        if prev is GraphemeBreak.CR and nxt is GraphemeBreak.LF:
            return False
        if prev in _BREAKS_AROUND or nxt in _BREAKS_AROUND:
            return True

        # Hangul syllable sequences
        if prev is GraphemeBreak.L and nxt in (
            GraphemeBreak.L,
            GraphemeBreak.V,
            GraphemeBreak.LV,
            GraphemeBreak.LVT,
        ):
            return False
        if prev in (GraphemeBreak.LV, GraphemeBreak.V) and nxt in (
            GraphemeBreak.V,
            GraphemeBreak.T,
        ):
            return False
        if prev in (GraphemeBreak.LVT, GraphemeBreak.T) and nxt is GraphemeBreak.T:
            return False

        if nxt in (GraphemeBreak.EXTEND, GraphemeBreak.ZWJ):
            return False
        if not self.legacy:
            if nxt is GraphemeBreak.SPACING_MARK or prev is GraphemeBreak.PREPEND:
                return False
            if is_conjunct_consonant(next_cp) and _links_to_consonant(cluster):
                return False

        if prev is GraphemeBreak.ZWJ and is_extended_pictographic(next_cp):
            # Emoji ZWJ sequence: pictograph Extend* ZWJ x pictograph
            for cp in reversed(cluster[:-1]):
                if grapheme_break(cp) is not GraphemeBreak.EXTEND:
                    return not is_extended_pictographic(cp)
            return True

        if prev is GraphemeBreak.REGIONAL_INDICATOR and nxt is GraphemeBreak.REGIONAL_INDICATOR:
            run = 0
            for cp in reversed(cluster):
                if grapheme_break(cp) is not GraphemeBreak.REGIONAL_INDICATOR:
                    break
                run += 1
            return run % 2 == 0

        return True


class UnknownStrategy(LookupError):
    """No clustering strategy is registered under the requested name."""


_STRATEGIES: dict[str, Callable[[], ClusterStrategy]] = {
    "codepoint": CodePointStrategy,
    "extended": GraphemeStrategy,
    "legacy": lambda: GraphemeStrategy(legacy=True),
}


def get_strategy(name: str) -> ClusterStrategy:
    """Return a new instance of the strategy registered under name."""
    try:
        factory = _STRATEGIES[name]
    except KeyError:
        known = ", ".join(sorted(_STRATEGIES))
        raise UnknownStrategy(f"unknown clustering strategy {name!r} (known: {known})") from None
    return factory()


def strategy_names() -> list[str]:
    return sorted(_STRATEGIES)
