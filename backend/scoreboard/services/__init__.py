"""Application services: pure analytics plus the player and match stores."""

from .ordering import generate_match_key, decode_match_key
from .stats import current_streak, win_rate
from .analytics import (
    build_leaderboard,
    build_player_stats,
    build_rivalries,
    find_best_partner,
    find_nemesis,
    head_to_head,
)

__all__ = [
    "generate_match_key",
    "decode_match_key",
    "current_streak",
    "win_rate",
    "build_leaderboard",
    "build_player_stats",
    "build_rivalries",
    "find_best_partner",
    "find_nemesis",
    "head_to_head",
]
