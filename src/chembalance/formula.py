"""Chemical formula parsing.

Formulas follow a small grammar: element symbols start with an uppercase
letter followed by optional lowercase letters and an optional atom count;
parenthesized groups nest arbitrarily and take an optional multiplier.
A trailing physical-state tag such as ``(aq)`` and any whitespace are
removed before parsing.

Examples:
    >>> parse("(NH4)2SO4").counts
    {'H': 8, 'N': 2, 'O': 4, 'S': 1}
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Mapping

from chembalance.errors import ParseError

ElementCounts = Dict[str, int]

_STATE_TAG = re.compile(r"\((?:s|l|g|aq)\)\s*$")
_WHITESPACE = re.compile(r"\s+")
_ALLOWED = re.compile(r"[A-Za-z0-9()]*")

_SUBSCRIPTS = str.maketrans("0123456789", "₀₁₂₃₄₅₆₇₈₉")


@dataclass(frozen=True)
class ParseResult:
    formula: str
    cleaned: str
    counts: Mapping[str, int] = field(default_factory=dict)
    error: ParseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def clean_formula(formula: str) -> str:
    """Remove whitespace and a trailing physical-state tag."""
    text = _WHITESPACE.sub("", str(formula))
    return _STATE_TAG.sub("", text)


def _read_number(text: str, start: int, end: int) -> tuple[int | None, int]:
    i = start
    while i < end and text[i].isdigit():
        i += 1
    if i == start:
        return None, start
    return int(text[start:i]), i


def _parse_group(
    text: str,
    start: int,
    end: int,
    multiplier: int,
    counts: ElementCounts,
) -> None:
    """Accumulate counts of ``text[start:end]`` scaled by ``multiplier``."""
    i = start
    while i < end:
        char = text[i]

        if "A" <= char <= "Z":
            j = i + 1
            while j < end and "a" <= text[j] <= "z":
                j += 1
            symbol = text[i:j]
            count, i = _read_number(text, j, end)
            if count is None:
                count = 1
            elif count == 0:
                raise ParseError(f"Zero atom count for {symbol}", text, j)
            counts[symbol] = counts.get(symbol, 0) + count * multiplier

        elif char == "(":
            depth = 1
            j = i + 1
            while j < end and depth > 0:
                if text[j] == "(":
                    depth += 1
                elif text[j] == ")":
                    depth -= 1
                j += 1
            if depth != 0:
                raise ParseError("Unmatched '('", text, i)

            group_start, group_end = i + 1, j - 1
            if group_start == group_end:
                raise ParseError("Empty group '()'", text, i)

            group_multiplier, i = _read_number(text, j, end)
            if group_multiplier is None:
                group_multiplier = 1
            elif group_multiplier == 0:
                raise ParseError("Zero group multiplier", text, j)

            _parse_group(text, group_start, group_end, multiplier * group_multiplier, counts)

        elif char == ")":
            raise ParseError("Unmatched ')'", text, i)

        else:
            raise ParseError(f"Unexpected character {char!r} at position {i}", text, i)


def parse_or_raise(formula: str) -> ElementCounts:
    """Parse ``formula`` into element counts, raising ``ParseError`` on failure."""
    text = clean_formula(formula)
    if not text:
        raise ParseError("Empty formula", str(formula), None)

    if not _ALLOWED.fullmatch(text):
        bad = next(i for i, c in enumerate(text) if not (c.isascii() and (c.isalnum() or c in "()")))
        raise ParseError(f"Invalid character in formula: {text[bad]!r}", text, bad)

    counts: ElementCounts = {}
    _parse_group(text, 0, len(text), 1, counts)
    return dict(sorted(counts.items()))


def parse(formula: str) -> ParseResult:
    """Parse ``formula`` without raising.

    Grammar violations are returned in ``ParseResult.error`` so a single bad
    formula does not unwind the caller.
    """
    cleaned = clean_formula(formula)
    try:
        counts = parse_or_raise(formula)
    except ParseError as e:
        return ParseResult(formula=str(formula), cleaned=cleaned, counts={}, error=e)
    return ParseResult(formula=str(formula), cleaned=cleaned, counts=counts)


def format_subscripts(formula: str) -> str:
    """Render atom counts and group multipliers as unicode subscripts."""
    out = []
    in_count = False
    for char in formula:
        if char.isdigit() and in_count:
            out.append(char.translate(_SUBSCRIPTS))
        else:
            out.append(char)
            in_count = char.isalpha() or char == ")"
    return "".join(out)
