"""Night action board: actions submitted during the current night."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional


@dataclass
class NightActionBoard:
    """Collected night actions for one round (before resolution)."""

    mafia_targets: dict[str, str] = field(default_factory=dict)  # mafia member id -> target id
    sheriff_target_id: Optional[str] = None
    sheriff_shoot: bool = False
    doctor_target_id: Optional[str] = None

    def reset(self) -> None:
        """Clear everything; called at the start of every night and on skip."""
        self.mafia_targets.clear()
        self.sheriff_target_id = None
        self.sheriff_shoot = False
        self.doctor_target_id = None

    def is_empty(self) -> bool:
        return not self.mafia_targets and self.sheriff_target_id is None and self.doctor_target_id is None

    def submit_mafia_target(self, member_id: str, target_id: str) -> bool:
        """Record (or overwrite) a mafia member's choice. Returns False if nothing changed."""
        if self.mafia_targets.get(member_id) == target_id:
            return False
        self.mafia_targets[member_id] = target_id
        return True

    def mafia_complete(self, living_mafia_ids: Iterable[str]) -> bool:
        """True once every living mafia member has submitted, or anyone has when none is alive."""
        if not self.mafia_targets:
            return False
        return all(mid in self.mafia_targets for mid in living_mafia_ids)

    def mafia_victim(self) -> Optional[str]:
        """Target with a strict plurality of member choices; None on a tie or no choices."""
        counts = Counter(self.mafia_targets.values()).most_common()
        if not counts:
            return None
        if len(counts) > 1 and counts[0][1] == counts[1][1]:
            return None
        return counts[0][0]

    def submit_sheriff_action(self, target_id: str, shoot: bool) -> bool:
        if self.sheriff_target_id == target_id and self.sheriff_shoot == shoot:
            return False
        self.sheriff_target_id = target_id
        self.sheriff_shoot = shoot
        return True

    def submit_doctor_action(self, target_id: str) -> bool:
        if self.doctor_target_id == target_id:
            return False
        self.doctor_target_id = target_id
        return True
