from __future__ import annotations

from typing import Sequence


def current_streak(results: Sequence[bool]) -> int:
    """Return the signed length of the run at the head of ``results``.

    Args:
        results: One player's outcomes ordered newest first, ``True`` for a
            win and ``False`` for a loss.

    Returns:
        A positive count for a winning streak, a negative count for a losing
        streak and ``0`` for an empty sequence. The run is not limited to any
        time window.
    """
    if not results:
        return 0
    head = results[0]
    count = 0
    for r in results:
        if r != head:
            break
        count += 1
    return count if head else -count


def win_rate(wins: int, losses: int) -> float:
    """Return ``wins / (wins + losses)``, or ``0.0`` when no games were played."""
    total = wins + losses
    return wins / total if total else 0.0
