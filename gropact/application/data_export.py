"""
Data portability: export / clear / import of the whole store

Export document: {user, pacts, rooms, supporterActivity, exportedAt}, scoped
to the authenticated user. The same document can be fed back into
import_all_data.
"""
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session

from gropact.application.auth import SessionManager
from gropact.domain.base import utc_now_iso
from gropact.domain.pact import Pact
from gropact.domain.room import Room
from gropact.domain.supporter_activity import SupporterActivity
from gropact.domain.user import User
from gropact.infrastructure.store import keys
from gropact.infrastructure.store.kv_store import KeyValueStore
from gropact.infrastructure.store.repositories import (
    PactsRepository,
    RoomsRepository,
    SupporterActivityRepository,
)

logger = logging.getLogger(__name__)


def export_all_data(db: Session) -> dict[str, Any]:
    user = SessionManager(db).get_user()
    pacts = [p for p in PactsRepository(db).load() if user and p.user_id == user.id]
    return {
        "user": user.model_dump(mode="json", by_alias=True, exclude_none=True, exclude={"password_hash"}) if user else None,
        "pacts": [p.to_json_dict() for p in pacts],
        "rooms": [r.to_json_dict() for r in RoomsRepository(db).load()],
        "supporterActivity": [a.to_json_dict() for a in SupporterActivityRepository(db).load()],
        "exportedAt": utc_now_iso(),
    }


def write_export_file(db: Session, path: str | Path) -> Path:
    path = Path(path)
    path.write_text(json.dumps(export_all_data(db), indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def clear_all_data(db: Session) -> None:
    """Remove every known key, sentinel included"""
    store = KeyValueStore(db)
    for key in keys.ALL_KEYS:
        store.remove(key)
    logger.info("All store data cleared")


def import_all_data(db: Session, snapshot: dict[str, Any]) -> bool:
    """
    Restore an export document

    User is upserted, pacts merged by id, rooms and supporter activity
    replaced. Returns False (and writes nothing) when the document does not
    validate.
    """
    try:
        user = User.model_validate(snapshot["user"]) if snapshot.get("user") else None
        pacts = [Pact.model_validate(p) for p in snapshot.get("pacts") or []]
        rooms = [Room.model_validate(r) for r in snapshot.get("rooms") or []]
        activity = [SupporterActivity.model_validate(a) for a in snapshot.get("supporterActivity") or []]
    except (ValidationError, TypeError, AttributeError):
        logger.warning("Import document rejected", exc_info=True)
        return False

    if user is not None:
        SessionManager(db).save_user(user)

    pacts_repo = PactsRepository(db)
    imported_ids = {p.id for p in pacts}
    pacts_repo.save([p for p in pacts_repo.load() if p.id not in imported_ids] + pacts)

    RoomsRepository(db).save(rooms)
    SupporterActivityRepository(db).save(activity)
    return True
