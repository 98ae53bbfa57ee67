"""Leaderboard, partner, rivalry and per-player statistics.

Every function here is a pure computation over two snapshots taken at the
start of a request: the roster (``Sequence[PlayerRecord]``) and the match log
(``Sequence[MatchRecord]``, newest first as returned by the match log). Nothing
is cached or mutated between calls.

Match participants are soft references. An id that is not on the roster still
counts toward every figure and resolves to ``UNKNOWN_PLAYER_NAME`` for display.
"""

from __future__ import annotations

from collections import defaultdict
from itertools import islice
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from ..exceptions import PlayerNotFound
from ..schemas import (
    LeaderboardEntryOut,
    PartnerStatsOut,
    PlayerStatsOut,
    RivalryEntryOut,
    RivalryStatsOut,
)
from .records import MatchRecord, PlayerRecord
from .stats import current_streak, win_rate

UNKNOWN_PLAYER_NAME = "Unknown"
RECENT_MATCH_LIMIT = 10
MIN_PARTNER_GAMES = 2
MIN_RIVALRY_MEETINGS = 2
MIN_NEMESIS_LOSSES = 2

CanonicalPair = Tuple[str, str]


class PairRecord(NamedTuple):
    """Wins and losses of one player with, or against, another."""

    wins: int
    losses: int

    @property
    def total(self) -> int:
        return self.wins + self.losses


class PlayerTally(NamedTuple):
    wins: int
    losses: int
    streak: int

    @property
    def total_games(self) -> int:
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        return win_rate(self.wins, self.losses)


def name_lookup(players: Iterable[PlayerRecord]) -> Dict[str, str]:
    return {p.id: p.name for p in players}


def resolve_name(names: Dict[str, str], player_id: str) -> str:
    return names.get(player_id, UNKNOWN_PLAYER_NAME)


def player_result(match: MatchRecord, player_id: str) -> Optional[bool]:
    """``True``/``False`` for a win/loss, ``None`` if the player did not play."""
    if player_id in match.winners:
        return True
    if player_id in match.losers:
        return False
    return None


def player_results(matches: Iterable[MatchRecord], player_id: str) -> List[bool]:
    """One player's outcomes, in the order of ``matches``."""
    results = []
    for m in matches:
        outcome = player_result(m, player_id)
        if outcome is not None:
            results.append(outcome)
    return results


def _tally(results: Sequence[bool]) -> PlayerTally:
    wins = sum(1 for r in results if r)
    return PlayerTally(
        wins=wins,
        losses=len(results) - wins,
        streak=current_streak(results),
    )


def tally_player(matches: Sequence[MatchRecord], player_id: str) -> PlayerTally:
    return _tally(player_results(matches, player_id))


def _results_by_player(matches: Iterable[MatchRecord]) -> Dict[str, List[bool]]:
    results: Dict[str, List[bool]] = defaultdict(list)
    for m in matches:
        winners = set(m.winners)
        for pid in winners:
            results[pid].append(True)
        for pid in set(m.losers) - winners:
            results[pid].append(False)
    return results


def build_leaderboard(
    players: Sequence[PlayerRecord], matches: Sequence[MatchRecord]
) -> List[LeaderboardEntryOut]:
    """Rank every roster player.

    Order is win rate descending, then games played descending, then player id
    ascending, so no two entries ever compare equal. Players without games are
    kept with a ``0.0`` win rate.
    """
    results = _results_by_player(matches)
    entries = []
    for p in players:
        tally = _tally(results.get(p.id, []))
        entries.append(
            LeaderboardEntryOut(
                player_id=p.id,
                player_name=p.name,
                avatar_emoji=p.avatar_emoji,
                nickname=p.nickname,
                wins=tally.wins,
                losses=tally.losses,
                total_games=tally.total_games,
                win_rate=tally.win_rate,
                streak=tally.streak,
            )
        )
    entries.sort(key=lambda e: (-e.win_rate, -e.total_games, e.player_id))
    return entries


def partner_records(
    matches: Iterable[MatchRecord], player_id: str
) -> Dict[str, PairRecord]:
    """Wins and losses together, keyed by teammate id."""
    counts: Dict[str, List[int]] = defaultdict(lambda: [0, 0])
    for m in matches:
        outcome = player_result(m, player_id)
        if outcome is None:
            continue
        first, second = m.winners if outcome else m.losers
        teammate = second if first == player_id else first
        counts[teammate][0 if outcome else 1] += 1
    return {pid: PairRecord(*wl) for pid, wl in counts.items()}


def find_best_partner(
    matches: Sequence[MatchRecord],
    player_id: str,
    names: Dict[str, str],
) -> Optional[PartnerStatsOut]:
    """Teammate with the most wins together, over at least two shared games.

    Ties go to fewer losses together, then to the smaller teammate id.
    """
    eligible = [
        (pid, rec)
        for pid, rec in partner_records(matches, player_id).items()
        if rec.total >= MIN_PARTNER_GAMES
    ]
    if not eligible:
        return None
    pid, rec = min(eligible, key=lambda item: (-item[1].wins, item[1].losses, item[0]))
    return PartnerStatsOut(
        partner_id=pid,
        partner_name=resolve_name(names, pid),
        wins=rec.wins,
        losses=rec.losses,
    )


def head_to_head(matches: Iterable[MatchRecord]) -> Dict[CanonicalPair, PairRecord]:
    """Directional results between every pair of players who have met.

    Each match contributes one result per winner/loser combination (up to
    four). Keys are ``(smaller_id, larger_id)``; ``wins`` counts the first
    player's wins over the second and ``losses`` the reverse.
    """
    counts: Dict[CanonicalPair, List[int]] = defaultdict(lambda: [0, 0])
    for m in matches:
        for winner in m.winners:
            for loser in m.losers:
                if winner == loser:
                    continue
                if winner < loser:
                    counts[(winner, loser)][0] += 1
                else:
                    counts[(loser, winner)][1] += 1
    return {pair: PairRecord(*wl) for pair, wl in counts.items()}


def build_rivalries(
    players: Sequence[PlayerRecord],
    matches: Sequence[MatchRecord],
    h2h: Optional[Dict[CanonicalPair, PairRecord]] = None,
) -> List[RivalryEntryOut]:
    """Pairs that have met at least twice, most meetings first.

    Equal meeting counts are ordered by the pair's first id, then second id.
    """
    names = name_lookup(players)
    if h2h is None:
        h2h = head_to_head(matches)
    rivalries = [
        RivalryEntryOut(
            player1_id=a,
            player1_name=resolve_name(names, a),
            player2_id=b,
            player2_name=resolve_name(names, b),
            player1_wins=rec.wins,
            player2_wins=rec.losses,
        )
        for (a, b), rec in h2h.items()
        if rec.total >= MIN_RIVALRY_MEETINGS
    ]
    rivalries.sort(
        key=lambda r: (-(r.player1_wins + r.player2_wins), r.player1_id, r.player2_id)
    )
    return rivalries


def opponent_records(
    matches: Sequence[MatchRecord],
    player_id: str,
    h2h: Optional[Dict[CanonicalPair, PairRecord]] = None,
) -> Dict[str, PairRecord]:
    """Wins and losses against each opponent, from ``player_id``'s side."""
    if h2h is None:
        h2h = head_to_head(matches)
    records: Dict[str, PairRecord] = {}
    for (a, b), rec in h2h.items():
        if a == player_id:
            records[b] = rec
        elif b == player_id:
            records[a] = PairRecord(wins=rec.losses, losses=rec.wins)
    return records


def find_nemesis(
    matches: Sequence[MatchRecord],
    player_id: str,
    names: Dict[str, str],
    h2h: Optional[Dict[CanonicalPair, PairRecord]] = None,
) -> Optional[RivalryStatsOut]:
    """Opponent the player has lost to most often, with at least two losses.

    Ties go to the opponent the player has beaten most, then to the smaller id.
    """
    eligible = [
        (pid, rec)
        for pid, rec in opponent_records(matches, player_id, h2h).items()
        if rec.losses >= MIN_NEMESIS_LOSSES
    ]
    if not eligible:
        return None
    pid, rec = min(eligible, key=lambda item: (-item[1].losses, -item[1].wins, item[0]))
    return RivalryStatsOut(
        opponent_id=pid,
        opponent_name=resolve_name(names, pid),
        wins_against=rec.wins,
        losses_against=rec.losses,
    )


def build_player_stats(
    player_id: str,
    players: Sequence[PlayerRecord],
    matches: Sequence[MatchRecord],
) -> PlayerStatsOut:
    """Assemble the full profile for one roster player.

    Raises:
        PlayerNotFound: if ``player_id`` is not on the roster.
    """
    player = next((p for p in players if p.id == player_id), None)
    if player is None:
        raise PlayerNotFound(player_id)

    names = name_lookup(players)
    own_matches = [m for m in matches if player_result(m, player_id) is not None]
    tally = tally_player(own_matches, player_id)

    return PlayerStatsOut(
        player_id=player.id,
        player_name=player.name,
        avatar_emoji=player.avatar_emoji,
        nickname=player.nickname,
        wins=tally.wins,
        losses=tally.losses,
        total_games=tally.total_games,
        win_rate=tally.win_rate,
        streak=tally.streak,
        best_partner=find_best_partner(own_matches, player_id, names),
        nemesis=find_nemesis(own_matches, player_id, names),
        recent_matches=[m.to_out() for m in islice(own_matches, RECENT_MATCH_LIMIT)],
    )
