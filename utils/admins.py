from __future__ import annotations

from flask import current_app

from extensions import db
from models import Guardian
from utils.security import hash_password
from utils.validation import MIN_PASSWORD_LENGTH


def ensure_admin(email: str, password: str, name: str = "Administrador", phone: str = "") -> tuple[Guardian, bool]:
    """Create an admin account or promote an existing one.

    Returns ``(guardian, created)``. Admin accounts get no fee schedule.
    """
    email = (email or "").strip().lower()
    if not email:
        raise ValueError("email is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValueError(f"password must have at least {MIN_PASSWORD_LENGTH} characters")

    guardian = Guardian.query.filter_by(email=email).first()
    created = guardian is None
    if created:
        guardian = Guardian(
            name=name,
            email=email,
            phone=phone,
            password_hash=hash_password(password),
            student_name="-",
            student_grade="-",
            role="admin",
        )
        db.session.add(guardian)
    else:
        guardian.role = "admin"
        guardian.password_hash = hash_password(password)
    db.session.commit()
    current_app.logger.info("%s admin %s", "Created" if created else "Promoted", email)
    return guardian, created
