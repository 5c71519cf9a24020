"""
Collection repositories over the key/value store

Каждый репозиторий загружает и сохраняет свою коллекцию целиком.
Rows that fail validation are skipped on load; the rest of the collection
survives. A collection holding an invalid entity is not written at all.
"""
import logging
from typing import Generic, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from gropact.domain.base import Entity
from gropact.domain.pact import Pact
from gropact.domain.room import Room
from gropact.domain.supporter_activity import SupporterActivity
from gropact.domain.user import User
from gropact.infrastructure.store import keys
from gropact.infrastructure.store.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


class CollectionRepository(Generic[E]):
    key: str
    entity: type[E]

    def __init__(self, db: Session):
        self.store = KeyValueStore(db)

    def load(self) -> list[E]:
        raw = self.store.get(self.key)
        if not isinstance(raw, list):
            return []
        collection = []
        for idx, item in enumerate(raw):
            try:
                collection.append(self.entity.model_validate(item))
            except ValidationError:
                logger.warning("Skipping invalid row %d in %s", idx, self.key, exc_info=True)
        return collection

    def save(self, collection: list[E]) -> bool:
        """Write the whole collection; False (nothing written) if any entity is invalid"""
        rows = [item.to_json_dict() for item in collection]
        try:
            for row in rows:
                self.entity.model_validate(row)
        except ValidationError:
            logger.warning("Refusing to write invalid entity to %s", self.key, exc_info=True)
            return False
        self.store.set(self.key, rows)
        return True


class UsersRepository(CollectionRepository[User]):
    key = keys.USERS
    entity = User


class PactsRepository(CollectionRepository[Pact]):
    key = keys.PACTS
    entity = Pact


class RoomsRepository(CollectionRepository[Room]):
    key = keys.ROOMS
    entity = Room


class SupporterActivityRepository(CollectionRepository[SupporterActivity]):
    """Newest first"""
    key = keys.SUPPORTER_ACTIVITY
    entity = SupporterActivity


class SessionRecord(BaseModel):
    user_id: str
    token: str


class SessionRepository:
    """Single {userId, token} record - who is using this device"""

    def __init__(self, db: Session):
        self.store = KeyValueStore(db)

    def load(self) -> SessionRecord | None:
        raw = self.store.get(keys.SESSION)
        if not isinstance(raw, dict):
            return None
        try:
            return SessionRecord(user_id=raw["userId"], token=raw["token"])
        except (KeyError, ValidationError):
            logger.warning("Stored session is malformed, treating as logged out")
            return None

    def save(self, record: SessionRecord) -> None:
        self.store.set(keys.SESSION, {"userId": record.user_id, "token": record.token})

    def clear(self) -> None:
        self.store.remove(keys.SESSION)
