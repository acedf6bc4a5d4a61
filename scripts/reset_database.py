"""
Danger: Drops and recreates ALL tables in the configured database.

Usage:
  python scripts/reset_database.py

Guardians, payments and activity logs are removed. Uploaded receipt files
under UPLOAD_FOLDER are left in place.

Set ASSUME_YES=1 to skip the confirmation prompt; SEED_DEMO_DATA=1 recreates
the demo guardian afterwards.
"""

from __future__ import annotations

import os
import sys


def main() -> int:
    # Ensure project root is on sys.path so `import app` works when run from scripts/
    here = os.path.dirname(os.path.abspath(__file__))
    root = os.path.abspath(os.path.join(here, os.pardir))
    if root not in sys.path:
        sys.path.insert(0, root)
    from app import create_app
    from extensions import db

    # Skip startup seeding; it runs after the tables are recreated
    app = create_app({"SEED_DEMO_DATA": False})
    seed = os.environ.get("SEED_DEMO_DATA", "").strip().upper() in ("1", "YES", "TRUE")

    with app.app_context():
        tables = sorted(db.metadata.tables)
        print("About to DROP and recreate tables:")
        for t in tables:
            print(f" - {t}")

        # Simple interactive guard (can be bypassed via ASSUME_YES)
        assume_yes = (os.environ.get("ASSUME_YES", "").strip().upper() in ("1", "YES", "TRUE"))
        if sys.stdin.isatty() and not assume_yes:
            try:
                ans = input("Type 'YES' to proceed: ").strip()
            except EOFError:
                ans = ""
            if ans != "YES":
                print("Aborted.")
                return 1

        db.drop_all()
        db.create_all()
        print("All tables recreated.")

        if seed:
            from utils.demo import seed_demo_data

            seed_demo_data()
            print("Demo data seeded.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
