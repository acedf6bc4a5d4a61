from __future__ import annotations

from datetime import datetime
from typing import Optional

from flask import current_app

from extensions import db
from models import Guardian, Payment
from utils.audit import log_activity
from utils.fees import FEE_MONTHS, PAYMENT_RECORDED
from utils.security import hash_password

DEMO_EMAIL = "juan@example.com"
DEMO_PASSWORD = "password123"
DEMO_YEAR = 2023
DEMO_AMOUNT = 55000
DEMO_PAID_MONTHS = 5


def seed_demo_data() -> Optional[Guardian]:
    """Create the demo guardian with a half-paid 2023 year.

    Returns the new guardian, or ``None`` when the demo account already exists.
    """
    if Guardian.query.filter_by(email=DEMO_EMAIL).first() is not None:
        return None

    current_app.logger.info("Inicializando datos de demostración...")
    guardian = Guardian(
        name="Juan Díaz",
        email=DEMO_EMAIL,
        phone="+56 9 1234 5678",
        password_hash=hash_password(DEMO_PASSWORD),
        student_name="Ana Díaz",
        student_grade="4° Básico",
        role="guardian",
    )
    db.session.add(guardian)
    db.session.flush()

    for i, month in enumerate(FEE_MONTHS):
        is_paid = i < DEMO_PAID_MONTHS
        # Paid on the 5th; FEE_MONTHS[0] is March, so month number is i + 3
        paid_on = datetime(DEMO_YEAR, i + 3, 5) if is_paid else None
        db.session.add(Payment(
            guardian_id=guardian.id,
            month=month,
            year=DEMO_YEAR,
            amount=DEMO_AMOUNT,
            paid=is_paid,
            payment_date=paid_on,
            receipt_url=f"/api/receipts/{month.lower()}_receipt.pdf" if is_paid else None,
            payment_method="Transferencia Bancaria" if is_paid else None,
        ))
        if is_paid:
            log_activity(guardian.id, PAYMENT_RECORDED, f"Pago registrado para {month}", timestamp=paid_on, commit=False)

    db.session.commit()
    current_app.logger.info("Datos de demostración creados correctamente")
    return guardian
