"""
Pact domain entity - the root aggregate of goals, check-ins and verifications

A pact exclusively owns its supporters, micro-goals, nudges, weekly plan,
check-ins, verifications, weekly reflections and progress cards.
"""
import math
from datetime import datetime, timedelta
from typing import Literal

from pydantic import Field

from gropact.domain.base import Entity, parse_iso

PACT_STATUS_ACTIVE = "active"
PACT_STATUS_COMPLETED = "completed"
PACT_STATUS_PAUSED = "paused"
PACT_STATUS_ABANDONED = "abandoned"

PACT_STATUSES = [
    PACT_STATUS_ACTIVE,
    PACT_STATUS_COMPLETED,
    PACT_STATUS_PAUSED,
    PACT_STATUS_ABANDONED,
]

DIFFICULTIES = ["easy", "medium", "hard"]

# Verification lifecycle: pending -> verified. "disputed" has no producing
# transition yet; it is accepted on load and never written by the services.
VERIFICATION_PENDING = "pending"
VERIFICATION_VERIFIED = "verified"
VERIFICATION_DISPUTED = "disputed"

WEEK = timedelta(days=7)


class Supporter(Entity):
    id: str
    name: str
    email: str | None = None
    avatar: str | None = None
    feedback: str = ""
    added_date: str
    trust_score: int = 0
    verifications_completed: int = 0
    encouragements_sent: int = 0
    role: Literal["accountability", "encourager", "verifier", "all"] = "all"


class MicroGoal(Entity):
    id: str
    goal_text: str
    difficulty: Literal["easy", "medium", "hard"] = "medium"
    due_date: str = ""
    reasoning: str = ""
    measurable_outcome: str = ""
    completed: bool = False
    completed_date: str | None = None


class Nudge(Entity):
    nudge_text: str
    behavioral_principle: str = ""


class WeeklyPlanDay(Entity):
    day: str
    micro_goal: str = ""
    reminder: str = ""
    supporter_prompt: str = ""
    completed: bool = False


class DailyCheckIn(Entity):
    id: str
    date: str
    note: str = ""
    mood: Literal["great", "good", "okay", "tough"]
    completed_goals: list[str] = []


class Verification(Entity):
    id: str
    pact_id: str
    type: Literal["photo", "strava", "supporter_confirm", "self_report"]
    status: Literal["pending", "verified", "disputed"] = VERIFICATION_PENDING
    evidence: str | None = None
    verified_by: str | None = None
    verified_at: str | None = None
    created_at: str
    note: str | None = None


class WeeklyReflection(Entity):
    id: str
    pact_id: str
    week_number: int
    week_start_date: str
    what_went_well: str = ""
    what_was_challenging: str = ""
    lessons_learned: str = ""
    recommitment: str = ""
    energy_level: Literal[1, 2, 3, 4, 5] = 3
    supporter_helpfulness: Literal[1, 2, 3, 4, 5] = 3
    mood: Literal["energized", "steady", "drained", "renewed"] = "steady"
    created_at: str


class ProgressStats(Entity):
    streak_days: int
    goals_completed: int
    total_goals: int
    completion_rate: int


class ProgressCard(Entity):
    """Snapshot of pact stats; only `shared` changes after generation"""
    id: str
    pact_id: str
    title: str
    description: str
    milestone: str
    verified: bool
    verification_method: str
    stats: ProgressStats
    created_at: str
    shared: bool = False


class PlanExplanations(Entity):
    pact_interpretation: str = ""
    behavior_insights: str = ""
    supporter_insights: str = ""


class DifficultyDistribution(Entity):
    easy_percent: float = 0
    medium_percent: float = 0
    hard_percent: float = 0


class AIPlanOutput(Entity):
    behavioral_state: str = ""
    identity_affirmation: str = ""
    micro_goals: list[MicroGoal] = []
    nudges: list[Nudge] = []
    weekly_plan: list[WeeklyPlanDay] = []
    explanations: PlanExplanations = Field(default_factory=PlanExplanations)
    difficulty_distribution: DifficultyDistribution = Field(default_factory=DifficultyDistribution)


class Pact(Entity):
    id: str
    user_id: str
    title: str
    description: str = ""
    identity_statement: str
    start_date: str
    end_date: str
    status: Literal["active", "completed", "paused", "abandoned"] = PACT_STATUS_ACTIVE
    category: str = ""
    supporters: list[Supporter] = []
    micro_goals: list[MicroGoal] = []
    nudges: list[Nudge] = []
    weekly_plan: list[WeeklyPlanDay] = []
    check_ins: list[DailyCheckIn] = []
    ai_plan: AIPlanOutput | None = None
    created_at: str
    updated_at: str
    streak: int = 0
    completion_rate: int = 0
    behavioral_state: str | None = None
    identity_affirmation: str | None = None
    verification_method: Literal["strava", "photo", "supporter", "self", "mixed"] = "self"
    verifications: list[Verification] = []
    weekly_reflections: list[WeeklyReflection] = []
    progress_cards: list[ProgressCard] = []

    def find_micro_goal(self, goal_id: str) -> MicroGoal | None:
        return next((g for g in self.micro_goals if g.id == goal_id), None)

    def find_verification(self, verification_id: str) -> Verification | None:
        return next((v for v in self.verifications if v.id == verification_id), None)

    def find_progress_card(self, card_id: str) -> ProgressCard | None:
        return next((c for c in self.progress_cards if c.id == card_id), None)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_completion_rate(goals: list[MicroGoal]) -> int:
    """
    Процент выполненных micro-goals

    round(100 * completed / total), 0 for an empty list. Halves round up.
    """
    if not goals:
        return 0
    completed = sum(1 for g in goals if g.completed)
    return round_half_up(completed / len(goals) * 100)


def current_week_number(start_date: str, now: datetime) -> int:
    """Elapsed pact week: max(1, ceil((now - start) / 7 days))"""
    elapsed = now - parse_iso(start_date)
    return max(1, math.ceil(elapsed / WEEK))


def week_start_date(start_date: str, week_number: int) -> str:
    return (parse_iso(start_date) + (week_number - 1) * WEEK).isoformat()
