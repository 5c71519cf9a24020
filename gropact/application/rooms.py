"""
Room / challenge use cases - membership, posts, likes, challenge participation

Same rules as pacts: whole-collection read-modify-write, unknown ids are
silent no-ops returning None.
"""
from typing import Callable

from sqlalchemy.orm import Session

from gropact.domain.room import ChallengeParticipant, Room, RoomChallenge, RoomPost
from gropact.infrastructure.store.repositories import RoomsRepository


class RoomService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = RoomsRepository(db)

    def get_rooms(self) -> list[Room]:
        return self.repo.load()

    def get_room(self, room_id: str) -> Room | None:
        return next((r for r in self.repo.load() if r.id == room_id), None)

    def get_my_rooms(self, user_id: str) -> list[Room]:
        return [r for r in self.repo.load() if user_id in r.members]

    def join_room(self, room_id: str, user_id: str) -> Room | None:
        """
        Idempotent join

        member_count is loose on purpose: it jumps to len(members) when that
        is larger, otherwise it just grows by one.
        """
        def apply(room: Room) -> bool:
            if user_id in room.members:
                return False
            room.members = [*room.members, user_id]
            if len(room.members) > room.member_count:
                room.member_count = len(room.members)
            else:
                room.member_count = room.member_count + 1
            return True

        return self._mutate(room_id, apply)

    def leave_room(self, room_id: str, user_id: str) -> Room | None:
        """Drops the member; member_count counts everyone who ever joined and stays put"""
        def apply(room: Room) -> bool:
            room.members = [m for m in room.members if m != user_id]
            return True

        return self._mutate(room_id, apply)

    def add_post(self, room_id: str, post: RoomPost) -> Room | None:
        def apply(room: Room) -> bool:
            room.posts = [post, *room.posts]
            return True

        return self._mutate(room_id, apply)

    def like_post(self, room_id: str, post_id: str, user_id: str) -> Room | None:
        def apply(room: Room) -> bool:
            post = room.find_post(post_id)
            if post is None:
                return False
            post.toggle_like(user_id)
            return True

        return self._mutate(room_id, apply)

    def add_challenge(self, room_id: str, challenge: RoomChallenge) -> Room | None:
        def apply(room: Room) -> bool:
            room.challenges = [*room.challenges, challenge]
            return True

        return self._mutate(room_id, apply)

    def join_challenge(self, room_id: str, challenge_id: str, user_id: str, user_name: str) -> Room | None:
        """One participant entry per user; rejoining changes nothing"""
        def apply(room: Room) -> bool:
            challenge = room.find_challenge(challenge_id)
            if challenge is None or challenge.find_participant(user_id) is not None:
                return False
            challenge.participants = [*challenge.participants, ChallengeParticipant.join(user_id, user_name)]
            return True

        return self._mutate(room_id, apply)

    def update_challenge_progress(self, room_id: str, challenge_id: str, user_id: str, progress: float) -> Room | None:
        """Stores progress as given; range checks belong to the caller"""
        def apply(room: Room) -> bool:
            participant = self._find_participant(room, challenge_id, user_id)
            if participant is None:
                return False
            participant.progress = progress
            return True

        return self._mutate(room_id, apply)

    def complete_challenge_milestone(self, room_id: str, challenge_id: str, user_id: str, milestone_id: str) -> Room | None:
        """Record a milestone once; progress is left to update_challenge_progress"""
        def apply(room: Room) -> bool:
            participant = self._find_participant(room, challenge_id, user_id)
            if participant is None or milestone_id in participant.completed_milestones:
                return False
            participant.completed_milestones = [*participant.completed_milestones, milestone_id]
            return True

        return self._mutate(room_id, apply)

    @staticmethod
    def _find_participant(room: Room, challenge_id: str, user_id: str) -> ChallengeParticipant | None:
        challenge = room.find_challenge(challenge_id)
        if challenge is None:
            return None
        return challenge.find_participant(user_id)

    def _mutate(self, room_id: str, apply: Callable[[Room], bool]) -> Room | None:
        """apply returns False when nothing changed, which skips the write"""
        rooms = self.repo.load()
        room = next((r for r in rooms if r.id == room_id), None)
        if room is None:
            return None
        if apply(room):
            self.repo.save(rooms)
        return room
