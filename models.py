from datetime import datetime

from extensions import db


def _iso(value):
    return value.isoformat() if value else None


class Guardian(db.Model):
    __tablename__ = 'guardians'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    phone = db.Column(db.String(30), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    student_name = db.Column(db.String(120), nullable=False)
    student_grade = db.Column(db.String(60), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='guardian')  # 'guardian' or 'admin'
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    payments = db.relationship('Payment', backref='guardian', cascade="all, delete-orphan")
    activity_logs = db.relationship('ActivityLog', backref='guardian', cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    def to_dict(self) -> dict:
        # The credential never leaves the server
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'studentName': self.student_name,
            'studentGrade': self.student_grade,
            'role': self.role,
        }

    def __repr__(self):
        return f'<Guardian {self.name} ({self.email})>'


class Payment(db.Model):
    __tablename__ = 'payments'
    __table_args__ = (
        db.UniqueConstraint('guardian_id', 'month', 'year', name='uq_payments_guardian_period'),
    )

    id = db.Column(db.Integer, primary_key=True)
    guardian_id = db.Column(db.Integer, db.ForeignKey('guardians.id'), nullable=False, index=True)
    month = db.Column(db.String(20), nullable=False)
    year = db.Column(db.Integer, nullable=False)
    amount = db.Column(db.Integer, nullable=False)
    paid = db.Column(db.Boolean, nullable=False, default=False)
    payment_date = db.Column(db.DateTime, nullable=True)
    receipt_url = db.Column(db.String(512), nullable=True)
    payment_method = db.Column(db.String(60), nullable=True)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'guardianId': self.guardian_id,
            'month': self.month,
            'year': self.year,
            'amount': self.amount,
            'paid': bool(self.paid),
            'paymentDate': _iso(self.payment_date),
            'receiptUrl': self.receipt_url,
            'paymentMethod': self.payment_method,
        }

    def __repr__(self):
        return f'<Payment GuardianID={self.guardian_id} {self.month} {self.year} Paid={self.paid}>'


class ActivityLog(db.Model):
    __tablename__ = 'activity_logs'

    id = db.Column(db.Integer, primary_key=True)
    guardian_id = db.Column(db.Integer, db.ForeignKey('guardians.id'), nullable=False, index=True)
    action = db.Column(db.String(100), nullable=False)
    details = db.Column(db.Text, nullable=True)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'guardianId': self.guardian_id,
            'action': self.action,
            'details': self.details,
            'timestamp': _iso(self.timestamp),
        }

    def __repr__(self):
        return f'<ActivityLog GuardianID={self.guardian_id} {self.action}>'
