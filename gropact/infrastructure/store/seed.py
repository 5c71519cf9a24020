"""
One-time demo seed of the persistent store

Guarded by the INITIALIZED sentinel: after the first run this is a no-op.
Existing non-empty collections are never overwritten; the demo user is
merged into the users list only when absent.
"""
import logging

from sqlalchemy.orm import Session

from gropact.config import get_settings
from gropact.domain.pact import (
    DailyCheckIn,
    MicroGoal,
    Nudge,
    Pact,
    Supporter,
    Verification,
    WeeklyPlanDay,
)
from gropact.domain.room import ChallengeMilestone, ChallengeParticipant, Room, RoomChallenge, RoomPost
from gropact.domain.supporter_activity import SupporterActivity
from gropact.domain.user import User
from gropact.infrastructure.store import keys
from gropact.infrastructure.store.kv_store import KeyValueStore
from gropact.infrastructure.store.repositories import (
    PactsRepository,
    RoomsRepository,
    SupporterActivityRepository,
    UsersRepository,
)

logger = logging.getLogger(__name__)

DEMO_USER_ID = "user-demo"


def demo_user() -> User:
    return User(
        id=DEMO_USER_ID,
        name="Alex Rivera",
        email="alex@gropact.app",
        bio="Building habits one pact at a time.",
        joined_date="2026-08-01T09:00:00+00:00",
        current_streak=4,
        longest_streak=12,
        completion_rate=75,
        total_pacts=2,
        completed_pacts=1,
        tier="mid",
        trust_score=82,
        total_verifications=6,
        supporter_of=[],
    )


def demo_pacts() -> list[Pact]:
    running = Pact(
        id="pact-run-5k",
        user_id=DEMO_USER_ID,
        title="Run a 5K without stopping",
        description="Build up from walk/run intervals to a continuous 5K.",
        identity_statement="I am a runner who shows up for myself.",
        start_date="2026-10-01",
        end_date="2026-11-30",
        status="active",
        category="fitness",
        supporters=[
            Supporter(
                id="sup-jordan",
                name="Jordan",
                feedback="Morning runs work best for you.",
                added_date="2026-10-01T10:00:00+00:00",
                trust_score=90,
                verifications_completed=3,
                encouragements_sent=5,
                role="verifier",
            ),
        ],
        micro_goals=[
            MicroGoal(id="mg-1", goal_text="Run 1K continuously", difficulty="easy",
                      due_date="2026-10-05", completed=True, completed_date="2026-10-04T07:30:00+00:00"),
            MicroGoal(id="mg-2", goal_text="Run 2K continuously", difficulty="medium",
                      due_date="2026-10-12", completed=True, completed_date="2026-10-11T07:10:00+00:00"),
            MicroGoal(id="mg-3", goal_text="Run 3K continuously", difficulty="medium",
                      due_date="2026-10-19", completed=True, completed_date="2026-10-16T06:55:00+00:00"),
            MicroGoal(id="mg-4", goal_text="Run 5K continuously", difficulty="hard",
                      due_date="2026-11-30"),
        ],
        nudges=[
            Nudge(nudge_text="Lay out your shoes the night before.",
                  behavioral_principle="Implementation intentions"),
        ],
        weekly_plan=[
            WeeklyPlanDay(day=day, micro_goal="Easy 20 minute run", reminder="7:00 AM")
            for day in ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
        ],
        check_ins=[
            DailyCheckIn(id="ci-2", date="2026-10-16T07:20:00+00:00", note="3K done, legs tired",
                         mood="good", completed_goals=["mg-3"]),
            DailyCheckIn(id="ci-1", date="2026-10-11T07:15:00+00:00", note="2K felt easier",
                         mood="great", completed_goals=["mg-2"]),
        ],
        created_at="2026-10-01T09:00:00+00:00",
        updated_at="2026-10-16T07:20:00+00:00",
        streak=4,
        completion_rate=75,
        verification_method="strava",
        verifications=[
            Verification(id="v-1", pact_id="pact-run-5k", type="strava", status="verified",
                         evidence="strava.com/activities/1", verified_by="Jordan",
                         verified_at="2026-10-11T12:00:00+00:00", created_at="2026-10-11T07:30:00+00:00"),
        ],
    )

    reading = Pact(
        id="pact-read-books",
        user_id=DEMO_USER_ID,
        title="Read 4 books this season",
        identity_statement="I am someone who learns every day.",
        start_date="2026-06-01",
        end_date="2026-08-31",
        status="completed",
        category="learning",
        micro_goals=[
            MicroGoal(id="mg-r1", goal_text="Finish book one", difficulty="easy",
                      due_date="2026-06-20", completed=True, completed_date="2026-06-18T21:00:00+00:00"),
            MicroGoal(id="mg-r2", goal_text="Finish book two", difficulty="medium",
                      due_date="2026-07-15", completed=True, completed_date="2026-07-12T21:00:00+00:00"),
        ],
        created_at="2026-06-01T09:00:00+00:00",
        updated_at="2026-08-30T21:00:00+00:00",
        streak=12,
        completion_rate=100,
        verification_method="self",
    )
    return [running, reading]


def demo_rooms() -> list[Room]:
    return [
        Room(
            id="room-runners",
            name="Morning Runners",
            description="Early risers logging their runs.",
            category="fitness",
            member_count=128,
            members=["user-sam", "user-priya"],
            posts=[
                RoomPost(id="post-1", user_id="user-sam", user_name="Sam",
                         content="First 10K this morning!", created_at="2026-10-15T06:45:00+00:00",
                         likes=1, liked_by=["user-priya"], type="milestone"),
            ],
            created_at="2026-05-01T08:00:00+00:00",
            icon="run",
            type="challenge",
            challenges=[
                RoomChallenge(
                    id="ch-october-miles",
                    room_id="room-runners",
                    title="October 50 Miles",
                    description="Log 50 miles before Halloween.",
                    creator_name="Sam",
                    start_date="2026-10-01",
                    end_date="2026-10-31",
                    verification_method="photo",
                    status="active",
                    prize="Finisher badge",
                    category="fitness",
                    milestones=[
                        ChallengeMilestone(id="ms-25", title="25 miles", due_date="2026-10-15",
                                           verification_required=True),
                        ChallengeMilestone(id="ms-50", title="50 miles", due_date="2026-10-31",
                                           verification_required=True),
                    ],
                    participants=[
                        ChallengeParticipant(user_id="user-sam", user_name="Sam",
                                             joined_at="2026-10-01T08:00:00+00:00", progress=60,
                                             completed_milestones=["ms-25"], verified=True),
                    ],
                ),
            ],
        ),
        Room(
            id="room-readers",
            name="Slow Readers Club",
            description="A page a day keeps the doomscroll away.",
            category="learning",
            member_count=42,
            members=["user-priya"],
            created_at="2026-04-12T08:00:00+00:00",
            icon="book",
            type="community",
        ),
    ]


def demo_supporter_activity() -> list[SupporterActivity]:
    return [
        SupporterActivity(id="act-2", type="verification", supporter_name="Jordan",
                          pact_title="Run a 5K without stopping", pact_id="pact-run-5k",
                          content="Confirmed your 2K run on Strava.", created_at="2026-10-11T12:00:00+00:00"),
        SupporterActivity(id="act-1", type="encouragement", supporter_name="Jordan",
                          pact_title="Run a 5K without stopping", pact_id="pact-run-5k",
                          content="You've got this, one step at a time!", created_at="2026-10-02T18:00:00+00:00"),
    ]


def initialize_store(db: Session) -> bool:
    """
    Засеять демо-данные при первом запуске

    Returns:
        True если сид выполнен сейчас, False если хранилище уже инициализировано
    """
    store = KeyValueStore(db)
    if store.get(keys.INITIALIZED):
        return False

    if get_settings().SEED_DEMO_DATA:
        users_repo = UsersRepository(db)
        users = users_repo.load()
        if not any(u.id == DEMO_USER_ID for u in users):
            users.append(demo_user())
        users_repo.save(users)

        pacts_repo = PactsRepository(db)
        if not pacts_repo.load():
            pacts_repo.save(demo_pacts())

        rooms_repo = RoomsRepository(db)
        if not rooms_repo.load():
            rooms_repo.save(demo_rooms())

        activity_repo = SupporterActivityRepository(db)
        if not activity_repo.load():
            activity_repo.save(demo_supporter_activity())

        logger.info("Store seeded with demo data")

    store.set(keys.INITIALIZED, True)
    return True
