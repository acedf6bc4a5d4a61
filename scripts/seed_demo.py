"""Create the demo guardian (juan@example.com / password123) with a half-paid 2023.

Usage:
  python scripts/seed_demo.py

Safe to run repeatedly; nothing happens when the demo account exists.
"""
import os
import sys

# Ensure project root is importable when running from scripts/
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app import create_app
from utils.demo import seed_demo_data


def main() -> int:
    app = create_app()
    with app.app_context():
        guardian = seed_demo_data()
    if guardian is None:
        print("Demo data already present; nothing to do.")
    else:
        print(f"Demo guardian created: {guardian.email}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
