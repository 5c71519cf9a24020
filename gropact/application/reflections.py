"""
Weekly reflection submission

PactService.add_weekly_reflection appends blindly; this is the call site that
keeps at most one reflection per (pact, week number).
"""
import uuid
from datetime import datetime, timezone
from typing import Literal

from sqlalchemy.orm import Session

from gropact.application.pacts import PactService
from gropact.domain.base import utc_now_iso
from gropact.domain.pact import Pact, WeeklyReflection, current_week_number, week_start_date


def has_reflection_for_week(pact: Pact, week_number: int) -> bool:
    return any(r.week_number == week_number for r in pact.weekly_reflections)


class SubmitWeeklyReflectionUseCase:
    """Use case: записать рефлексию за текущую неделю пакта (не более одной)"""

    def __init__(self, db: Session):
        self.db = db
        self.pacts = PactService(db)

    def execute(
        self,
        pact_id: str,
        what_went_well: str,
        what_was_challenging: str,
        lessons_learned: str,
        recommitment: str | None = None,
        energy_level: Literal[1, 2, 3, 4, 5] = 3,
        supporter_helpfulness: Literal[1, 2, 3, 4, 5] = 3,
        mood: Literal["energized", "steady", "drained", "renewed"] = "steady",
        now: datetime | None = None,
    ) -> WeeklyReflection | None:
        """
        Returns:
            The stored reflection, or None when the pact is unknown or this
            week already has a reflection
        """
        pact = self.pacts.get_pact(pact_id)
        if pact is None:
            return None

        week_number = current_week_number(pact.start_date, now or datetime.now(timezone.utc))
        if has_reflection_for_week(pact, week_number):
            return None

        reflection = WeeklyReflection(
            id="wr-" + uuid.uuid4().hex[:8],
            pact_id=pact.id,
            week_number=week_number,
            week_start_date=week_start_date(pact.start_date, week_number),
            what_went_well=what_went_well.strip(),
            what_was_challenging=what_was_challenging.strip(),
            lessons_learned=lessons_learned.strip(),
            recommitment=(recommitment if recommitment is not None else f"I recommit to {pact.title}").strip(),
            energy_level=energy_level,
            supporter_helpfulness=supporter_helpfulness,
            mood=mood,
            created_at=utc_now_iso(),
        )
        self.pacts.add_weekly_reflection(pact.id, reflection)
        return reflection
