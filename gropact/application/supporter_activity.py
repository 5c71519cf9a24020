"""Supporter activity feed - append-only, newest first"""
import uuid

from sqlalchemy.orm import Session

from gropact.domain.base import utc_now_iso
from gropact.domain.pact import Pact
from gropact.domain.supporter_activity import SupporterActivity
from gropact.infrastructure.store.repositories import SupporterActivityRepository


class SupporterActivityFeed:
    def __init__(self, db: Session):
        self.db = db
        self.repo = SupporterActivityRepository(db)

    def list_activity(self, pact_id: str | None = None, limit: int | None = None) -> list[SupporterActivity]:
        items = self.repo.load()
        if pact_id is not None:
            items = [a for a in items if a.pact_id == pact_id]
        if limit is not None:
            items = items[:limit]
        return items

    def add_activity(self, activity: SupporterActivity) -> SupporterActivity:
        self.repo.save([activity, *self.repo.load()])
        return activity

    def send_encouragement(self, supporter_name: str, content: str, pact: Pact | None = None) -> SupporterActivity:
        activity = SupporterActivity(
            id="act-" + uuid.uuid4().hex[:8],
            type="encouragement",
            supporter_name=supporter_name,
            pact_title=pact.title if pact else "",
            pact_id=pact.id if pact else "",
            content=content.strip(),
            created_at=utc_now_iso(),
        )
        return self.add_activity(activity)
