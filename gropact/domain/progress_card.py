"""Progress card derivation - immutable snapshot of a pact's stats"""
from gropact.domain.base import utc_now_iso
from gropact.domain.pact import Pact, ProgressCard, ProgressStats, VERIFICATION_VERIFIED


def build_progress_card(pact: Pact, card_id: str, created_at: str | None = None) -> ProgressCard:
    """
    Snapshot current streak / micro-goals / completion rate into a card

    The card is never recomputed later; only `shared` may change.
    """
    goals_completed = sum(1 for g in pact.micro_goals if g.completed)
    total_goals = len(pact.micro_goals)

    return ProgressCard(
        id=card_id,
        pact_id=pact.id,
        title=pact.title,
        description=f"{goals_completed} of {total_goals} micro-goals completed",
        milestone=f"{pact.streak}-day streak",
        verified=any(v.status == VERIFICATION_VERIFIED for v in pact.verifications),
        verification_method=pact.verification_method,
        stats=ProgressStats(
            streak_days=pact.streak,
            goals_completed=goals_completed,
            total_goals=total_goals,
            completion_rate=pact.completion_rate,
        ),
        created_at=created_at or utc_now_iso(),
        shared=False,
    )
