"""Day vote tally with Mayor weighting."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from game.rules import MAYOR_VOTE_WEIGHT
from game.state import Player


@dataclass
class VoteTally:
    """Votes cast during the current day: voter id -> target id."""

    votes: dict[str, str] = field(default_factory=dict)

    def reset(self) -> None:
        self.votes.clear()

    def cast_vote(self, voter_id: str, target_id: str) -> bool:
        """Record or overwrite a vote. Returns False if the same vote was already cast."""
        if self.votes.get(voter_id) == target_id:
            return False
        self.votes[voter_id] = target_id
        return True

    def is_complete(self, living_ids: Iterable[str]) -> bool:
        """True when every living player has a vote on record."""
        living = set(living_ids)
        return len(living & self.votes.keys()) == len(living)

    def weighted_counts(self, players: Iterable[Player]) -> Counter:
        """Target id -> weighted votes, counting only voters alive right now."""
        alive_by_id = {p.id: p for p in players if p.alive}
        counts: Counter = Counter()
        for voter_id, target_id in self.votes.items():
            voter = alive_by_id.get(voter_id)
            if voter is None:
                continue
            counts[target_id] += MAYOR_VOTE_WEIGHT if voter.is_mayor else 1
        return counts

    def resolve(self, players: Iterable[Player]) -> Optional[str]:
        """Target with the strictly greatest weighted count; None on any tie, including no votes."""
        ranked = self.weighted_counts(players).most_common()
        if not ranked:
            return None
        if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
            return None
        return ranked[0][0]
