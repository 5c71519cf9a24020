"""
Room domain entity - community space with members, posts and challenges
"""
from typing import Literal

from gropact.domain.base import Entity, utc_now_iso

CHALLENGE_STATUS_UPCOMING = "upcoming"
CHALLENGE_STATUS_ACTIVE = "active"
CHALLENGE_STATUS_COMPLETED = "completed"


class RoomPost(Entity):
    id: str
    user_id: str
    user_name: str
    content: str
    created_at: str
    likes: int = 0
    liked_by: list[str] = []
    type: Literal["update", "milestone", "encouragement", "question"] = "update"

    def toggle_like(self, user_id: str) -> None:
        """likes always moves together with liked_by"""
        if user_id in self.liked_by:
            self.liked_by = [uid for uid in self.liked_by if uid != user_id]
            self.likes = max(0, self.likes - 1)
        else:
            self.liked_by = [*self.liked_by, user_id]
            self.likes = self.likes + 1


class ChallengeMilestone(Entity):
    id: str
    title: str
    description: str = ""
    due_date: str = ""
    verification_required: bool = False


class ChallengeParticipant(Entity):
    user_id: str
    user_name: str
    joined_at: str
    progress: float = 0
    completed_milestones: list[str] = []
    verified: bool = False

    @staticmethod
    def join(user_id: str, user_name: str) -> "ChallengeParticipant":
        return ChallengeParticipant(
            user_id=user_id,
            user_name=user_name,
            joined_at=utc_now_iso(),
            progress=0,
            completed_milestones=[],
            verified=False,
        )


class RoomChallenge(Entity):
    id: str
    room_id: str
    title: str
    description: str = ""
    creator_name: str = ""
    start_date: str
    end_date: str
    verification_method: Literal["photo", "self_report", "supporter"] = "self_report"
    participants: list[ChallengeParticipant] = []
    milestones: list[ChallengeMilestone] = []
    status: Literal["upcoming", "active", "completed"] = CHALLENGE_STATUS_UPCOMING
    prize: str | None = None
    category: str = ""

    def find_participant(self, user_id: str) -> ChallengeParticipant | None:
        return next((p for p in self.participants if p.user_id == user_id), None)


class Room(Entity):
    """
    member_count is a separate counter: it grows on join and is never
    decremented on leave, so it can exceed len(members).
    """
    id: str
    name: str
    description: str = ""
    category: str = ""
    member_count: int = 0
    members: list[str] = []
    posts: list[RoomPost] = []
    created_at: str
    is_public: bool = True
    icon: str = ""
    challenges: list[RoomChallenge] = []
    type: Literal["community", "challenge", "creator"] = "community"
    creator_id: str | None = None
    creator_name: str | None = None

    def find_post(self, post_id: str) -> RoomPost | None:
        return next((p for p in self.posts if p.id == post_id), None)

    def find_challenge(self, challenge_id: str) -> RoomChallenge | None:
        return next((c for c in self.challenges if c.id == challenge_id), None)
