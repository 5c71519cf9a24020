"""
Key/value store - whole-collection JSON blobs in the store_entries table

Fail-soft contract: a read that cannot be served returns None, a write that
cannot be applied is dropped. Nothing here raises to the caller; callers
treat None as "collection empty".
"""
import json
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gropact.infrastructure.db.models import StoreEntry

logger = logging.getLogger(__name__)


class KeyValueStore:
    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Any | None:
        """
        Прочитать значение по ключу

        Returns:
            Десериализованное значение или None (нет ключа, битый JSON,
            БД недоступна)
        """
        try:
            entry = self.db.get(StoreEntry, key)
        except SQLAlchemyError:
            logger.warning("Store read failed for key=%s", key, exc_info=True)
            self.db.rollback()
            return None

        if entry is None or not entry.value_json:
            return None

        try:
            return json.loads(entry.value_json)
        except ValueError:
            logger.warning("Store value for key=%s is not valid JSON, treating as empty", key)
            return None

    def set(self, key: str, value: Any) -> None:
        """Записать значение целиком (last write wins); ошибки записи глотаются"""
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError):
            logger.warning("Store value for key=%s is not JSON-serializable, write dropped", key)
            return

        try:
            entry = self.db.get(StoreEntry, key)
            if entry is None:
                self.db.add(StoreEntry(key=key, value_json=payload))
            else:
                entry.value_json = payload
            self.db.commit()
        except SQLAlchemyError:
            logger.warning("Store write failed for key=%s, write dropped", key, exc_info=True)
            self.db.rollback()

    def remove(self, key: str) -> None:
        try:
            self.db.query(StoreEntry).filter(StoreEntry.key == key).delete()
            self.db.commit()
        except SQLAlchemyError:
            logger.warning("Store remove failed for key=%s", key, exc_info=True)
            self.db.rollback()

    def has(self, key: str) -> bool:
        return self.get(key) is not None
