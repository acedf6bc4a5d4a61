from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from flask import current_app

from extensions import db
from models import Guardian, Payment
from utils.audit import log_activity
from utils.errors import PaymentNotFound

MONTHS = [
    "Enero", "Febrero", "Marzo", "Abril", "Mayo", "Junio",
    "Julio", "Agosto", "Septiembre", "Octubre", "Noviembre", "Diciembre",
]
# The school year is billed from March to December
FEE_MONTHS = MONTHS[2:]

PAYMENT_RECORDED = "Pago registrado"


def month_index(month: str) -> int:
    """Calendar position of a Spanish month name; unknown names sort last."""
    try:
        return MONTHS.index(month)
    except ValueError:
        return len(MONTHS)


def _period_key(payment: Payment) -> tuple[int, int]:
    return payment.year, month_index(payment.month)


def create_fee_schedule(guardian: Guardian, year: int, amount: Optional[int] = None, commit: bool = True) -> List[Payment]:
    """Create the unpaid March-December obligations of ``year`` for ``guardian``."""
    if amount is None:
        amount = int(current_app.config.get("MONTHLY_FEE_AMOUNT", 55000))
    payments = [
        Payment(guardian_id=guardian.id, month=month, year=year, amount=amount, paid=False)
        for month in FEE_MONTHS
    ]
    db.session.add_all(payments)
    if commit:
        db.session.commit()
    return payments


def payments_for(guardian_id: int) -> List[Payment]:
    payments = Payment.query.filter_by(guardian_id=guardian_id).all()
    return sorted(payments, key=_period_key)


def find_payment(guardian_id: int, month: str, year: int, lock: bool = False) -> Optional[Payment]:
    query = Payment.query.filter_by(guardian_id=guardian_id, month=month, year=year)
    if lock:
        # Serialises concurrent uploads for the same period (no-op on SQLite)
        query = query.with_for_update()
    return query.one_or_none()


def record_payment(
    guardian_id: int,
    month: str,
    year: int,
    payment_date: datetime,
    payment_method: str,
    receipt_url: Optional[str] = None,
    amount: Optional[int] = None,
) -> Payment:
    """Mark the guardian's obligation for ``month``/``year`` as paid.

    Raises :class:`PaymentNotFound` without touching anything when the period
    has no obligation. Otherwise the payment update and its "Pago registrado"
    activity entry are committed together. ``receipt_url`` only replaces the
    stored value when a file was supplied. ``amount`` is informational.
    """
    payment = find_payment(guardian_id, month, year, lock=True)
    if payment is None:
        raise PaymentNotFound(guardian_id, month, year)

    log = current_app.logger
    if payment.paid:
        log.warning("Payment %s (%s %s) already paid; overwriting with a new receipt", payment.id, month, year)
    if amount is not None and amount != payment.amount:
        log.warning(
            "Payment %s (%s %s): claimed amount %s differs from obligation %s",
            payment.id, month, year, amount, payment.amount,
        )

    payment.paid = True
    payment.payment_date = payment_date
    payment.payment_method = payment_method
    if receipt_url:
        payment.receipt_url = receipt_url

    log_activity(
        guardian_id,
        PAYMENT_RECORDED,
        f"Pago registrado para {month} {year}",
        commit=False,
    )
    db.session.commit()
    log.info("Payment recorded: guardian=%s period=%s %s method=%s", guardian_id, month, year, payment_method)
    return payment


def payment_summary(guardian_id: int) -> Dict[str, Any]:
    """Dashboard figures: paid count, next unpaid month and most recent payment."""
    payments = payments_for(guardian_id)
    unpaid = [p for p in payments if not p.paid]
    paid_with_date = [p for p in payments if p.paid and p.payment_date]
    next_payment = unpaid[0] if unpaid else None
    last_payment = max(paid_with_date, key=lambda p: p.payment_date) if paid_with_date else None
    return {
        "totalPaid": sum(1 for p in payments if p.paid),
        "totalPayments": len(payments),
        "nextPayment": next_payment.to_dict() if next_payment else None,
        "lastPayment": last_payment.to_dict() if last_payment else None,
    }
