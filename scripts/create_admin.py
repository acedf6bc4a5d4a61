import argparse
import getpass
import os
import sys

# Ensure project root is importable when running from scripts/
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from app import create_app
from utils.admins import ensure_admin


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an admin account or promote an existing guardian.")
    parser.add_argument("--email", required=True, help="Admin email (login)")
    parser.add_argument("--name", default="Administrador", help="Display name")
    parser.add_argument("--phone", default="", help="Contact phone")
    parser.add_argument("--password", default=None, help="Password (prompted when omitted)")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    app = create_app()
    with app.app_context():
        try:
            guardian, created = ensure_admin(args.email, password, name=args.name, phone=args.phone)
        except ValueError as e:
            print(f"Could not create admin: {e}")
            return 2
    print(f"{'Created' if created else 'Promoted'} admin: {guardian.email}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
