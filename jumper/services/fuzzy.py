from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

_BOUNDARY_CHARS = "/_- ."


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    """One matching listing row: its index, relevance and highlighted offsets."""

    index: int
    score: int
    positions: tuple[int, ...]


def _fold_char(char: str) -> str:
    folded = char.casefold()
    if len(folded) == 1:
        return folded
    lowered = char.lower()
    return lowered if len(lowered) == 1 else char


def _fold(text: str) -> str:
    # One output char per input char so offsets index the original name.
    return "".join(_fold_char(char) for char in text)


def _match_positions(query: str, candidate: str) -> list[int] | None:
    positions: list[int] = []
    prev_idx = -1
    for needle in query:
        idx = candidate.find(needle, prev_idx + 1)
        if idx < 0:
            return None
        positions.append(idx)
        prev_idx = idx
    return positions


def _tighten(query: str, candidate: str, positions: list[int]) -> list[int]:
    # Walk backwards so every matched char sits as close as possible to its successor.
    tightened = list(positions)
    for offset in range(len(query) - 2, -1, -1):
        idx = candidate.rfind(query[offset], tightened[offset], tightened[offset + 1])
        if idx >= 0:
            tightened[offset] = idx
    return tightened


def _score_positions(candidate: str, positions: Sequence[int]) -> int:
    score = 0
    prev_idx = -1
    run = 0
    for idx in positions:
        if idx == prev_idx + 1:
            run += 1
            score += 20 + min(16, run * 4)
        else:
            gap = idx - prev_idx - 1
            run = 0
            score -= min(40, gap * 2)
        if idx == 0 or candidate[idx - 1] in _BOUNDARY_CHARS:
            score += 35
        prev_idx = idx
    score -= len(candidate) // 5
    return score


def fuzzy_match(query: str, candidate: str) -> tuple[int, tuple[int, ...]] | None:
    """Subsequence-match query against candidate, case-insensitively.

    Returns ``(score, positions)`` where positions are character offsets into
    candidate, or None if query is not a subsequence of candidate.
    """
    if not query:
        return None
    query_folded = _fold(query)
    candidate_folded = _fold(candidate)
    positions = _match_positions(query_folded, candidate_folded)
    if positions is None:
        return None
    greedy_score = _score_positions(candidate_folded, positions)
    tightened = _tighten(query_folded, candidate_folded, positions)
    tight_score = _score_positions(candidate_folded, tightened)
    if tight_score > greedy_score:
        return tight_score, tuple(tightened)
    return greedy_score, tuple(positions)


def search_names(query: str, names: Sequence[str]) -> list[FuzzyMatch]:
    """Score every name; best first, ties broken by listing order."""
    matches: list[FuzzyMatch] = []
    for index, name in enumerate(names):
        result = fuzzy_match(query, name)
        if result is None:
            continue
        score, positions = result
        matches.append(FuzzyMatch(index=index, score=score, positions=positions))
    matches.sort(key=lambda match: (-match.score, match.index))
    return matches
