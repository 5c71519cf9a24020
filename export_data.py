"""
Export the signed-in user's data to a JSON file.
Run:  python export_data.py [path]
"""
import sys
from datetime import date

from gropact.infrastructure.db.session import get_db
from gropact.application.data_export import write_export_file

db = next(get_db())

target = sys.argv[1] if len(sys.argv) > 1 else f"gropact-export-{date.today().isoformat()}.json"
path = write_export_file(db, target)
print(f"✓ Exported to {path}")

db.close()
