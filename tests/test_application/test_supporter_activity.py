"""
Tests for the supporter activity feed
"""
from gropact.application.pacts import PactService
from gropact.application.supporter_activity import SupporterActivityFeed
from gropact.domain.supporter_activity import SupporterActivity


def _activity(activity_id: str, pact_id: str = "pact-1") -> SupporterActivity:
    return SupporterActivity(id=activity_id, type="nudge", supporter_name="Jordan",
                             pact_title="Meditate daily", pact_id=pact_id,
                             content="Time to sit!", created_at="2026-10-02T00:00:00+00:00")


def test_feed_is_newest_first(db_session):
    feed = SupporterActivityFeed(db_session)
    feed.add_activity(_activity("a1"))
    feed.add_activity(_activity("a2"))

    assert [a.id for a in feed.list_activity()] == ["a2", "a1"]


def test_filter_by_pact_and_limit(db_session):
    feed = SupporterActivityFeed(db_session)
    for activity_id, pact_id in [("a1", "pact-1"), ("a2", "pact-2"), ("a3", "pact-1")]:
        feed.add_activity(_activity(activity_id, pact_id))

    assert [a.id for a in feed.list_activity(pact_id="pact-1")] == ["a3", "a1"]
    assert [a.id for a in feed.list_activity(limit=1)] == ["a3"]


def test_send_encouragement(db_session, make_pact):
    feed = SupporterActivityFeed(db_session)

    activity = feed.send_encouragement("Jordan", "  Keep going!  ", pact=make_pact())

    assert activity.type == "encouragement"
    assert activity.content == "Keep going!"
    assert activity.pact_id == "pact-1"
    assert activity.pact_title == "Meditate daily"
    assert feed.list_activity()[0].id == activity.id


def test_send_encouragement_without_pact(db_session):
    activity = SupporterActivityFeed(db_session).send_encouragement("Jordan", "Proud of you")
    assert activity.pact_id == ""


def test_deleted_pact_leaves_feed_untouched(db_session, make_pact):
    PactService(db_session).create_pact(make_pact())
    feed = SupporterActivityFeed(db_session)
    feed.add_activity(_activity("a1"))

    PactService(db_session).delete_pact("pact-1")

    assert [a.pact_id for a in feed.list_activity()] == ["pact-1"]
