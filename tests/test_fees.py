from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import ActivityLog, Guardian, Payment
from utils.demo import DEMO_EMAIL, DEMO_PASSWORD, seed_demo_data
from utils.errors import PaymentNotFound
from utils.fees import FEE_MONTHS, create_fee_schedule, month_index, payment_summary, record_payment
from utils.security import hash_password

from conftest import login


@pytest.fixture
def guardian(app):
    with app.app_context():
        g = Guardian(
            name="Pedro Soto",
            email="pedro@example.com",
            phone="+56 9 1111 2222",
            password_hash=hash_password("clave123"),
            student_name="Luis Soto",
            student_grade="1° Medio",
        )
        db.session.add(g)
        db.session.commit()
        create_fee_schedule(g, 2024)
        yield g


def test_fee_schedule_is_march_to_december(app, guardian):
    payments = Payment.query.filter_by(guardian_id=guardian.id).all()
    assert len(payments) == 10
    assert sorted((p.month for p in payments), key=month_index) == FEE_MONTHS
    assert all(p.year == 2024 and not p.paid for p in payments)


def test_record_payment_updates_matched_period(app, guardian):
    payment = record_payment(guardian.id, "Mayo", 2024, datetime(2024, 5, 3), "Efectivo")
    assert payment.paid is True
    assert payment.payment_date == datetime(2024, 5, 3)
    assert payment.payment_method == "Efectivo"
    assert payment.receipt_url is None
    logs = ActivityLog.query.filter_by(guardian_id=guardian.id).all()
    assert len(logs) == 1
    assert logs[0].action == "Pago registrado"


def test_record_payment_unknown_period_changes_nothing(app, guardian):
    with pytest.raises(PaymentNotFound):
        record_payment(guardian.id, "Mayo", 2025, datetime(2025, 5, 3), "Efectivo")
    assert Payment.query.filter_by(paid=True).count() == 0
    assert ActivityLog.query.count() == 0


def test_record_payment_does_not_match_other_guardians(app, guardian):
    other = Guardian(
        name="Otra", email="otra@example.com", phone="1", password_hash=hash_password("clave123"),
        student_name="X", student_grade="Y",
    )
    db.session.add(other)
    db.session.commit()
    with pytest.raises(PaymentNotFound):
        record_payment(other.id, "Mayo", 2024, datetime(2024, 5, 3), "Efectivo")


def test_record_payment_accepts_mismatched_amount(app, guardian):
    payment = record_payment(guardian.id, "Junio", 2024, datetime(2024, 6, 1), "Efectivo", amount=1)
    assert payment.paid is True
    assert payment.amount == 55000


def test_record_payment_sets_receipt_url_only_when_given(app, guardian):
    record_payment(guardian.id, "Julio", 2024, datetime(2024, 7, 1), "Efectivo", receipt_url="/api/uploads/a.pdf")
    payment = record_payment(guardian.id, "Julio", 2024, datetime(2024, 7, 2), "Cheque")
    assert payment.receipt_url == "/api/uploads/a.pdf"
    assert payment.payment_date == datetime(2024, 7, 2)


def test_one_obligation_per_period(app, guardian):
    db.session.add(Payment(guardian_id=guardian.id, month="Mayo", year=2024, amount=1))
    with pytest.raises(IntegrityError):
        db.session.commit()
    db.session.rollback()


def test_summary_without_payments(app, guardian):
    summary = payment_summary(guardian.id + 100)
    assert summary == {"totalPaid": 0, "totalPayments": 0, "nextPayment": None, "lastPayment": None}


def test_seed_demo_data_is_idempotent(app, client):
    with app.app_context():
        demo = seed_demo_data()
        assert demo is not None
        assert seed_demo_data() is None
        payments = Payment.query.filter_by(guardian_id=demo.id).all()
        assert len(payments) == 10
        paid = [p for p in payments if p.paid]
        assert sorted(p.month for p in paid) == sorted(FEE_MONTHS[:5])
        marzo = next(p for p in paid if p.month == "Marzo")
        assert marzo.payment_date == datetime(2023, 3, 5)
        assert marzo.receipt_url == "/api/receipts/marzo_receipt.pdf"
        assert ActivityLog.query.filter_by(guardian_id=demo.id).count() == 5

    assert login(client, DEMO_EMAIL, DEMO_PASSWORD).status_code == 200
    summary = client.get('/api/payments/summary').get_json()
    assert summary["totalPaid"] == 5
    assert summary["nextPayment"]["month"] == "Agosto"
    assert summary["lastPayment"]["month"] == "Julio"
