"""
AI planning agent boundary

This module only shapes the request and parses the response; the planning
itself happens in the external agent. One call per generate(), no retry:
retrying is the user pressing "generate" again.
"""
import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from gropact.config import Settings, get_settings
from gropact.domain.base import parse_iso
from gropact.domain.pact import (
    AIPlanOutput,
    DailyCheckIn,
    DIFFICULTIES,
    DifficultyDistribution,
    MicroGoal,
    Nudge,
    Pact,
    PlanExplanations,
    WeeklyPlanDay,
)
from gropact.domain.user import User

logger = logging.getLogger(__name__)

UNEXPECTED_FORMAT = "The agent returned an unexpected response format. Please try again."
NETWORK_ERROR = "Network error. Please check your connection and try again."
GENERIC_FAILURE = "Something went wrong. Please try again."

MAX_RESULT_UNWRAPS = 2


# === Agent response schema (snake_case, as sent by the agent) ===

class _AgentModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # null fields fall back to defaults
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class AgentMicroGoal(_AgentModel):
    goal_text: str = ""
    difficulty: str = ""
    due_date: str = ""
    reasoning: str = ""
    measurable_outcome: str = ""


class AgentNudge(_AgentModel):
    nudge_text: str = ""
    behavioral_principle: str = ""


class AgentPlanDay(_AgentModel):
    day: str = ""
    micro_goal: str = ""
    reminder: str = ""
    supporter_prompt: str = ""


class AgentExplanations(_AgentModel):
    pact_interpretation: str = ""
    behavior_insights: str = ""
    supporter_insights: str = ""


class AgentDifficultyDistribution(_AgentModel):
    easy_percent: float = 0
    medium_percent: float = 0
    hard_percent: float = 0


class AgentPlanResponse(_AgentModel):
    behavioral_state: str = ""
    identity_affirmation: str = ""
    micro_goals: list[AgentMicroGoal] = []
    nudges: list[AgentNudge] = []
    weekly_plan: list[AgentPlanDay] = []
    explanations: AgentExplanations = Field(default_factory=AgentExplanations)
    difficulty_distribution: AgentDifficultyDistribution = Field(default_factory=AgentDifficultyDistribution)


# === Parse result (tagged union) ===

@dataclass
class PlanRecognized:
    response: AgentPlanResponse


@dataclass
class PlanNotRecognized:
    reason: str


PlanParseResult = PlanRecognized | PlanNotRecognized


@dataclass
class PlanAgentResult:
    plan: AIPlanOutput | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.plan is not None


def _looks_like_plan(candidate: Any) -> bool:
    return isinstance(candidate, dict) and "behavioral_state" in candidate


def _decode_once(candidate: Any) -> Any:
    if not isinstance(candidate, str):
        return candidate
    try:
        return json.loads(candidate)
    except ValueError:
        return candidate


def parse_agent_response(raw: Any) -> PlanParseResult:
    """
    Recognize the plan in whatever shape the agent sent it

    Tried in order: the object itself, one JSON string decode, then up to two
    nested `.result` unwraps (each also string-decoded once).
    """
    candidate = _decode_once(raw)
    unwraps = 0
    while not _looks_like_plan(candidate):
        if not (isinstance(candidate, dict) and "result" in candidate):
            return PlanNotRecognized(reason="no behavioral_state in response")
        if unwraps == MAX_RESULT_UNWRAPS:
            return PlanNotRecognized(reason="plan nested deeper than expected")
        candidate = _decode_once(candidate["result"])
        unwraps += 1

    try:
        return PlanRecognized(response=AgentPlanResponse.model_validate(candidate))
    except ValidationError as exc:
        return PlanNotRecognized(reason=f"plan fields malformed: {exc.error_count()} error(s)")


def to_plan_output(agent: AgentPlanResponse) -> AIPlanOutput:
    """Agent shape -> stored AIPlanOutput; unknown difficulty becomes medium"""
    micro_goals = []
    for i, g in enumerate(agent.micro_goals):
        difficulty = g.difficulty.lower()
        micro_goals.append(MicroGoal(
            id=f"ai-mg-{i}",
            goal_text=g.goal_text,
            difficulty=difficulty if difficulty in DIFFICULTIES else "medium",
            due_date=g.due_date,
            reasoning=g.reasoning,
            measurable_outcome=g.measurable_outcome,
            completed=False,
        ))

    return AIPlanOutput(
        behavioral_state=agent.behavioral_state,
        identity_affirmation=agent.identity_affirmation,
        micro_goals=micro_goals,
        nudges=[Nudge(nudge_text=n.nudge_text, behavioral_principle=n.behavioral_principle) for n in agent.nudges],
        weekly_plan=[
            WeeklyPlanDay(day=d.day, micro_goal=d.micro_goal, reminder=d.reminder,
                          supporter_prompt=d.supporter_prompt, completed=False)
            for d in agent.weekly_plan
        ],
        explanations=PlanExplanations(
            pact_interpretation=agent.explanations.pact_interpretation,
            behavior_insights=agent.explanations.behavior_insights,
            supporter_insights=agent.explanations.supporter_insights,
        ),
        difficulty_distribution=DifficultyDistribution(
            easy_percent=agent.difficulty_distribution.easy_percent,
            medium_percent=agent.difficulty_distribution.medium_percent,
            hard_percent=agent.difficulty_distribution.hard_percent,
        ),
    )


# === Request ===

def _check_in_moment(check_in: DailyCheckIn) -> datetime:
    """Unparseable dates sort as oldest"""
    try:
        return parse_iso(check_in.date)
    except ValueError:
        logger.warning("Check-in %s has unparseable date %r", check_in.id, check_in.date)
        return datetime.min.replace(tzinfo=timezone.utc)


def recent_check_in_notes(pacts: list[Pact], limit: int = 5) -> list[str]:
    """Newest check-in notes across the given pacts"""
    check_ins = [ci for p in pacts for ci in p.check_ins]
    check_ins.sort(key=_check_in_moment, reverse=True)
    return [ci.note or "Check-in recorded" for ci in check_ins[:limit]]


def build_plan_request(
    pact: Pact,
    user: User,
    recent_check_ins: list[str],
    cadence: str = "daily",
    today: date | None = None,
) -> dict[str, Any]:
    return {
        "pact": {
            "title": pact.title,
            "description": pact.description,
            "category": pact.category,
            "cadence": cadence,
            "start_date": pact.start_date,
            "end_date": pact.end_date,
        },
        "user_profile": {
            "name": user.name,
            "current_streak": pact.streak,
            "last_check_in": (today or date.today()).isoformat(),
            "completion_rate": pact.completion_rate,
            "recent_check_ins": list(recent_check_ins),
        },
        "supporter_feedback": [
            {"supporter_name": s.name, "feedback": s.feedback}
            for s in pact.supporters
            if s.name and s.name.strip()
        ],
    }


# === Client ===

class PlanAgentClient:
    """
    Posts the plan request to the agent endpoint

    Envelope expected back: {"success": bool, "response": ..., "error": str}.
    """

    def __init__(self, settings: Settings | None = None, http: requests.Session | None = None):
        self.settings = settings or get_settings()
        self.http = http or requests.Session()

    def generate(self, request_payload: dict[str, Any]) -> PlanAgentResult:
        headers = {"Content-Type": "application/json"}
        if self.settings.AGENT_API_KEY:
            headers["x-api-key"] = self.settings.AGENT_API_KEY

        try:
            resp = self.http.post(
                self.settings.AGENT_URL,
                json={"message": json.dumps(request_payload), "agent_id": self.settings.AGENT_ID},
                headers=headers,
                timeout=self.settings.AGENT_TIMEOUT_SECONDS,
            )
            envelope = resp.json()
        except (requests.RequestException, ValueError):
            logger.exception("Plan agent call failed (agent_id=%s)", self.settings.AGENT_ID)
            return PlanAgentResult(error=NETWORK_ERROR)

        if not isinstance(envelope, dict) or not envelope.get("success"):
            message = envelope.get("error") if isinstance(envelope, dict) else None
            return PlanAgentResult(error=message or GENERIC_FAILURE)

        parsed = parse_agent_response(envelope.get("response"))
        if isinstance(parsed, PlanNotRecognized):
            logger.warning("Plan agent response not recognized: %s", parsed.reason)
            return PlanAgentResult(error=UNEXPECTED_FORMAT)

        return PlanAgentResult(plan=to_plan_output(parsed.response))
