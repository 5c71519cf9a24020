"""
Tests for room use cases: membership, posts, likes, challenges
"""
import pytest

from gropact.application.rooms import RoomService
from gropact.domain.room import ChallengeMilestone, Room, RoomChallenge, RoomPost
from gropact.infrastructure.store.repositories import RoomsRepository


@pytest.fixture
def service(db_session):
    RoomsRepository(db_session).save([
        Room(id="room-1", name="Runners", member_count=2, members=["u-a", "u-b"],
             created_at="2026-10-01T00:00:00+00:00"),
    ])
    return RoomService(db_session)


def _post(post_id: str = "p1", user_id: str = "u-a") -> RoomPost:
    return RoomPost(id=post_id, user_id=user_id, user_name="A", content="Ran 5K",
                    created_at="2026-10-02T00:00:00+00:00")


def _challenge(challenge_id: str = "ch-1") -> RoomChallenge:
    return RoomChallenge(
        id=challenge_id, room_id="room-1", title="October miles",
        start_date="2026-10-01", end_date="2026-10-31", status="active",
        milestones=[ChallengeMilestone(id="ms-1", title="25 miles")],
    )


class TestMembership:
    def test_join_adds_member_and_counts(self, service):
        room = service.join_room("room-1", "u-c")
        assert room.members == ["u-a", "u-b", "u-c"]
        assert room.member_count == 3

    def test_join_twice_keeps_single_entry(self, service):
        service.join_room("room-1", "u-c")
        room = service.join_room("room-1", "u-c")

        assert room.members.count("u-c") == 1
        assert service.get_room("room-1").member_count == 3

    def test_join_bumps_counter_when_ahead_of_members(self, db_session):
        RoomsRepository(db_session).save([
            Room(id="big", name="Big", member_count=120, members=["u-a"],
                 created_at="2026-10-01T00:00:00+00:00"),
        ])
        room = RoomService(db_session).join_room("big", "u-b")
        assert room.member_count == 121

    def test_join_catches_up_lagging_counter(self, db_session):
        RoomsRepository(db_session).save([
            Room(id="lag", name="Lag", member_count=0, members=["u-a", "u-b"],
                 created_at="2026-10-01T00:00:00+00:00"),
        ])
        room = RoomService(db_session).join_room("lag", "u-c")
        assert room.member_count == 3

    def test_leave_does_not_decrement_counter(self, service):
        room = service.leave_room("room-1", "u-a")
        assert room.members == ["u-b"]
        assert room.member_count == 2

    def test_leave_absent_member_is_noop(self, service):
        room = service.leave_room("room-1", "u-zzz")
        assert room.members == ["u-a", "u-b"]

    def test_my_rooms(self, service):
        assert [r.id for r in service.get_my_rooms("u-a")] == ["room-1"]
        assert service.get_my_rooms("u-zzz") == []

    def test_unknown_room(self, service):
        assert service.join_room("ghost", "u-a") is None
        assert service.get_room("ghost") is None


class TestPosts:
    def test_add_post_prepends(self, service):
        service.add_post("room-1", _post("p1"))
        room = service.add_post("room-1", _post("p2"))
        assert [p.id for p in room.posts] == ["p2", "p1"]

    def test_like_toggle_twice_restores(self, service):
        service.add_post("room-1", _post())

        liked = service.like_post("room-1", "p1", "u-b").posts[0]
        assert liked.likes == 1
        assert liked.liked_by == ["u-b"]

        unliked = service.like_post("room-1", "p1", "u-b").posts[0]
        assert unliked.likes == 0
        assert "u-b" not in unliked.liked_by

    def test_likes_track_liked_by(self, service):
        service.add_post("room-1", _post())
        for user_id in ("u-a", "u-b", "u-c", "u-b"):
            service.like_post("room-1", "p1", user_id)

        post = service.get_room("room-1").posts[0]
        assert post.likes == len(post.liked_by) == 2

    def test_like_unknown_post_is_noop(self, service):
        room = service.like_post("room-1", "ghost", "u-a")
        assert room.posts == []


class TestChallenges:
    def test_add_and_join(self, service):
        service.add_challenge("room-1", _challenge())

        room = service.join_challenge("room-1", "ch-1", "u-a", "A")

        participant = room.challenges[0].participants[0]
        assert participant.user_id == "u-a"
        assert participant.progress == 0
        assert participant.completed_milestones == []
        assert participant.verified is False

    def test_join_challenge_is_idempotent(self, service):
        service.add_challenge("room-1", _challenge())
        service.join_challenge("room-1", "ch-1", "u-a", "A")
        service.update_challenge_progress("room-1", "ch-1", "u-a", 40)

        service.join_challenge("room-1", "ch-1", "u-a", "A")

        participants = service.get_room("room-1").challenges[0].participants
        assert len(participants) == 1
        assert participants[0].progress == 40

    def test_progress_is_not_clamped(self, service):
        service.add_challenge("room-1", _challenge())
        service.join_challenge("room-1", "ch-1", "u-a", "A")

        room = service.update_challenge_progress("room-1", "ch-1", "u-a", 140)

        assert room.challenges[0].participants[0].progress == 140

    def test_progress_for_non_participant_is_noop(self, service):
        service.add_challenge("room-1", _challenge())
        room = service.update_challenge_progress("room-1", "ch-1", "u-a", 10)
        assert room.challenges[0].participants == []

    def test_complete_milestone_once(self, service):
        service.add_challenge("room-1", _challenge())
        service.join_challenge("room-1", "ch-1", "u-a", "A")

        service.complete_challenge_milestone("room-1", "ch-1", "u-a", "ms-1")
        room = service.complete_challenge_milestone("room-1", "ch-1", "u-a", "ms-1")

        participant = room.challenges[0].participants[0]
        assert participant.completed_milestones == ["ms-1"]
        assert participant.progress == 0

    def test_unknown_challenge(self, service):
        room = service.join_challenge("room-1", "ghost", "u-a", "A")
        assert room.challenges == []
