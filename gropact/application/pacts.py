"""
Pact use cases - CRUD plus derived-state transitions

Every operation re-reads the whole pacts collection, applies the change and
writes the collection back. A stale or unknown id is a silent no-op that
returns None; callers check existence first.
"""
import uuid
from typing import Callable

from sqlalchemy.orm import Session

from gropact.domain.base import utc_now_iso
from gropact.domain.pact import (
    AIPlanOutput,
    DailyCheckIn,
    Pact,
    ProgressCard,
    Supporter,
    Verification,
    WeeklyReflection,
    PACT_STATUS_ACTIVE,
    PACT_STATUS_COMPLETED,
    VERIFICATION_PENDING,
    VERIFICATION_VERIFIED,
    compute_completion_rate,
)
from gropact.domain.progress_card import build_progress_card
from gropact.infrastructure.store.repositories import PactsRepository


class PactService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = PactsRepository(db)

    # ── queries ───────────────────────────────────────────────────

    def get_all_pacts(self) -> list[Pact]:
        return self.repo.load()

    def get_pacts(self, user_id: str) -> list[Pact]:
        return [p for p in self.repo.load() if p.user_id == user_id]

    def get_active_pacts(self, user_id: str) -> list[Pact]:
        return [p for p in self.get_pacts(user_id) if p.status == PACT_STATUS_ACTIVE]

    def get_completed_pacts(self, user_id: str) -> list[Pact]:
        return [p for p in self.get_pacts(user_id) if p.status == PACT_STATUS_COMPLETED]

    def get_pact(self, pact_id: str) -> Pact | None:
        return next((p for p in self.repo.load() if p.id == pact_id), None)

    # ── CRUD ──────────────────────────────────────────────────────

    def create_pact(self, pact: Pact) -> Pact | None:
        """Append; the caller supplies a unique id and required fields"""
        pacts = self.repo.load()
        pacts.append(pact)
        if not self.repo.save(pacts):
            return None
        return pact

    def update_pact(self, pact: Pact) -> Pact | None:
        """Whole-entity replace by id, stamps updated_at. An invalid entity is not written."""
        pact.updated_at = utc_now_iso()
        pacts = self.repo.load()
        for idx, existing in enumerate(pacts):
            if existing.id == pact.id:
                pacts[idx] = pact
                if not self.repo.save(pacts):
                    return None
                return pact
        return None

    def delete_pact(self, pact_id: str) -> None:
        """Hard delete. Feed entries that mention the pact are left as they are."""
        pacts = self.repo.load()
        self.repo.save([p for p in pacts if p.id != pact_id])

    # ── state transitions ─────────────────────────────────────────

    def add_check_in(self, pact_id: str, check_in: DailyCheckIn) -> Pact | None:
        """
        Prepend the check-in and bump the streak by exactly one

        No same-day or gap detection: every check-in counts.
        """
        def apply(pact: Pact) -> None:
            pact.check_ins = [check_in, *pact.check_ins]
            pact.streak = pact.streak + 1

        return self._mutate(pact_id, apply)

    def toggle_micro_goal(self, pact_id: str, goal_id: str) -> Pact | None:
        def apply(pact: Pact) -> None:
            goal = pact.find_micro_goal(goal_id)
            if goal is not None:
                goal.completed = not goal.completed
                goal.completed_date = utc_now_iso() if goal.completed else None
            pact.completion_rate = compute_completion_rate(pact.micro_goals)

        return self._mutate(pact_id, apply)

    def toggle_weekly_day(self, pact_id: str, day_index: int) -> Pact | None:
        def apply(pact: Pact) -> None:
            if 0 <= day_index < len(pact.weekly_plan):
                day = pact.weekly_plan[day_index]
                day.completed = not day.completed

        return self._mutate(pact_id, apply)

    def add_verification(self, pact_id: str, verification: Verification) -> Pact | None:
        """Append; status is always reset to pending"""
        def apply(pact: Pact) -> None:
            pending = verification.model_copy(update={"status": VERIFICATION_PENDING})
            pact.verifications = [*pact.verifications, pending]

        return self._mutate(pact_id, apply)

    def confirm_verification(self, pact_id: str, verification_id: str, verifier_name: str) -> Pact | None:
        """
        pending -> verified, stamping verified_by / verified_at

        Unknown id is a no-op. Repeating the call with the same verifier keeps
        the first stamp; a different verifier overwrites it.
        """
        def apply(pact: Pact) -> None:
            verification = pact.find_verification(verification_id)
            if verification is None:
                return
            already_stamped = (
                verification.status == VERIFICATION_VERIFIED
                and verification.verified_by == verifier_name
            )
            if not already_stamped:
                verification.status = VERIFICATION_VERIFIED
                verification.verified_by = verifier_name
                verification.verified_at = utc_now_iso()

        return self._mutate(pact_id, apply)

    def add_weekly_reflection(self, pact_id: str, reflection: WeeklyReflection) -> Pact | None:
        """Raw append; one-per-week is checked by the caller (see reflections.py)"""
        def apply(pact: Pact) -> None:
            pact.weekly_reflections = [*pact.weekly_reflections, reflection]

        return self._mutate(pact_id, apply)

    def generate_progress_card(self, pact_id: str) -> ProgressCard | None:
        pact = self.get_pact(pact_id)
        if pact is None:
            return None

        card = build_progress_card(pact, card_id="pc-" + uuid.uuid4().hex[:8])

        def apply(target: Pact) -> None:
            target.progress_cards = [*target.progress_cards, card]

        self._mutate(pact_id, apply)
        return card

    def share_progress_card(self, pact_id: str, card_id: str) -> Pact | None:
        """One way: there is no unshare"""
        def apply(pact: Pact) -> None:
            card = pact.find_progress_card(card_id)
            if card is not None:
                card.shared = True

        return self._mutate(pact_id, apply)

    # ── supporters & plan ─────────────────────────────────────────

    def add_supporter(self, pact_id: str, supporter: Supporter) -> Pact | None:
        def apply(pact: Pact) -> None:
            pact.supporters = [*pact.supporters, supporter]

        return self._mutate(pact_id, apply)

    def remove_supporter(self, pact_id: str, supporter_id: str) -> Pact | None:
        def apply(pact: Pact) -> None:
            pact.supporters = [s for s in pact.supporters if s.id != supporter_id]

        return self._mutate(pact_id, apply)

    def apply_plan(self, pact_id: str, plan: AIPlanOutput) -> Pact | None:
        """
        Merge an agent plan into the pact

        Empty plan lists keep the pact's current ones; blank state and
        affirmation keep the current text.
        """
        def apply(pact: Pact) -> None:
            if plan.micro_goals:
                pact.micro_goals = list(plan.micro_goals)
            if plan.nudges:
                pact.nudges = list(plan.nudges)
            if plan.weekly_plan:
                pact.weekly_plan = list(plan.weekly_plan)
            pact.ai_plan = plan
            pact.behavioral_state = plan.behavioral_state or pact.behavioral_state
            pact.identity_affirmation = plan.identity_affirmation or pact.identity_affirmation

        return self._mutate(pact_id, apply)

    def _mutate(self, pact_id: str, apply: Callable[[Pact], None]) -> Pact | None:
        pacts = self.repo.load()
        pact = next((p for p in pacts if p.id == pact_id), None)
        if pact is None:
            return None
        apply(pact)
        pact.updated_at = utc_now_iso()
        if not self.repo.save(pacts):
            return None
        return pact
