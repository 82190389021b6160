"""
Progress Aggregator for challenge tracking.

Merges a contribution into a participant's stored progress according to the
challenge scope, and decides completion:

| Scope       | Merge                  | Completed when                 |
|-------------|------------------------|--------------------------------|
| group       | current + contribution | sum of all participants >= goal |
| competitive | max(current, contrib)  | this user's value >= goal       |
| cumulative  | current + contribution | this user's value >= goal       |

The group total is derived from the stored per-user values; no separate
counter is kept.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from domain.models import Challenge, ChallengeScope


def _add(current: float, contribution: float) -> float:
    return current + contribution


def _best(current: float, contribution: float) -> float:
    return max(current, contribution)


@dataclass(frozen=True)
class ScopePolicy:
    """Merge rule plus completion basis for one scope."""

    merge: Callable[[float, float], float]
    completes_on_group_total: bool


SCOPE_POLICIES: Dict[ChallengeScope, ScopePolicy] = {
    ChallengeScope.GROUP: ScopePolicy(merge=_add, completes_on_group_total=True),
    ChallengeScope.COMPETITIVE: ScopePolicy(merge=_best, completes_on_group_total=False),
    # Deprecated pure-summation rule
    ChallengeScope.CUMULATIVE: ScopePolicy(merge=_add, completes_on_group_total=False),
}


@dataclass(frozen=True)
class AggregationResult:
    """Outcome of merging one contribution."""

    new_total: float
    completed: bool
    group_total: float
    changed: bool


class ProgressAggregator:
    """Applies scope policies to challenge snapshots. Stateless."""

    def __init__(self, policies: Optional[Dict[ChallengeScope, ScopePolicy]] = None):
        self._policies = {**SCOPE_POLICIES, **(policies or {})}

    def policy_for(self, challenge: Challenge) -> ScopePolicy:
        return self._policies[challenge.scope]

    def merged_progress(
        self,
        challenge: Challenge,
        user_id: str,
        contribution: float,
    ) -> float:
        """The user's stored value after merging `contribution`."""
        current = challenge.progress_for_user(user_id)
        if contribution <= 0:
            return current
        return self.policy_for(challenge).merge(current, contribution)

    def group_total(self, challenge: Challenge) -> float:
        """Sum of every participant's stored value."""
        return sum(challenge.progress.values())

    def is_completed(self, challenge: Challenge, user_id: str) -> bool:
        """Completion test against a (committed) snapshot."""
        if self.policy_for(challenge).completes_on_group_total:
            return self.group_total(challenge) >= challenge.goal
        return challenge.progress_for_user(user_id) >= challenge.goal

    def apply_contribution(
        self,
        challenge: Challenge,
        user_id: str,
        contribution: float,
    ) -> AggregationResult:
        """
        Merge `contribution` into a snapshot without persisting anything.

        A contribution <= 0 leaves the state unchanged and never completes.

        Args:
            challenge: Current challenge snapshot
            user_id: Contributing participant
            contribution: Calculated contribution

        Returns:
            AggregationResult with the new per-user value and completion flag
        """
        current = challenge.progress_for_user(user_id)
        if contribution <= 0:
            return AggregationResult(
                new_total=current,
                completed=False,
                group_total=self.group_total(challenge),
                changed=False,
            )

        new_total = self.merged_progress(challenge, user_id, contribution)
        updated = challenge.with_progress(user_id, new_total)
        return AggregationResult(
            new_total=new_total,
            completed=self.is_completed(updated, user_id),
            group_total=self.group_total(updated),
            changed=new_total != current,
        )
