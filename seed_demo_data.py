"""
Seed demo data into the store (one-time, guarded by the sentinel key).
Run:  python seed_demo_data.py
"""
import logging

from gropact.config import get_settings
from gropact.infrastructure.db.session import create_schema, get_session_factory
from gropact.infrastructure.store.seed import initialize_store

logging.basicConfig(level=get_settings().LOG_LEVEL, format="%(asctime)s %(levelname)s %(message)s")

create_schema()
db = get_session_factory()()

if initialize_store(db):
    print("✓ Store initialized")
else:
    print("Store already initialized, nothing to do")

db.close()
