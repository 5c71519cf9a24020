"""
Очистить хранилище: удалить все коллекции, сессию и флаг инициализации
"""
import logging

from gropact.config import get_settings
from gropact.infrastructure.db.session import get_db
from gropact.application.data_export import clear_all_data

logging.basicConfig(level=get_settings().LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")

db = next(get_db())

print("=== ОЧИСТКА ХРАНИЛИЩА ===")
clear_all_data(db)
print("✓ Хранилище очищено!")

db.close()
