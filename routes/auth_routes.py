from datetime import datetime

from flask import Blueprint, current_app, g, jsonify, request, session
from sqlalchemy.exc import IntegrityError

from extensions import db, limiter
from models import Guardian
from utils import current_guardian, login_required
from utils.audit import log_activity
from utils.fees import create_fee_schedule
from utils.security import hash_password, verify_password
from utils.validation import validate_login, validate_registration

auth_bp = Blueprint('auth', __name__, url_prefix='/api')

DUPLICATE_EMAIL = "El correo electrónico ya está registrado"


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _login_limit() -> str:
    return current_app.config.get("LOGIN_RATE_LIMIT", "10 per minute")


@auth_bp.route('/register', methods=['POST'])
def register():
    """Create a guardian, its fee schedule for the current year and a "Registro" log.

    Only an authenticated admin may choose the new account's role.
    """
    data = validate_registration(_json_body())

    if Guardian.query.filter_by(email=data['email']).first() is not None:
        return jsonify({"message": DUPLICATE_EMAIL}), 400

    actor = current_guardian()
    role = data['role'] if (data['role'] and actor is not None and actor.is_admin) else 'guardian'

    guardian = Guardian(
        name=data['name'],
        email=data['email'],
        phone=data['phone'],
        password_hash=hash_password(data['password']),
        student_name=data['student_name'],
        student_grade=data['student_grade'],
        role=role,
    )
    db.session.add(guardian)
    try:
        db.session.flush()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"message": DUPLICATE_EMAIL}), 400

    log_activity(guardian.id, "Registro", "Nuevo apoderado registrado", commit=False)
    create_fee_schedule(guardian, datetime.utcnow().year, commit=False)
    db.session.commit()
    current_app.logger.info("Guardian registered: id=%s email=%s role=%s", guardian.id, guardian.email, guardian.role)

    return jsonify({
        "message": "Apoderado registrado exitosamente",
        "user": guardian.to_dict(),
    }), 201


@auth_bp.route('/login', methods=['POST'])
# Throttle brute-force attempts
@limiter.limit(_login_limit)
def login():
    data = validate_login(_json_body())

    guardian = Guardian.query.filter_by(email=data['email']).first()
    stored = guardian.password_hash if guardian is not None else None
    if not verify_password(stored, data['password']):
        current_app.logger.info("Failed login for %s", data['email'])
        return jsonify({"message": "Credenciales inválidas"}), 401

    session.clear()
    session['guardian_id'] = guardian.id
    session.permanent = True
    g.current_guardian = guardian
    current_app.logger.info("Guardian %s logged in", guardian.id)

    return jsonify({
        "message": "Inicio de sesión exitoso",
        "user": guardian.to_dict(),
    }), 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    guardian_id = session.get('guardian_id')
    session.clear()
    if guardian_id is not None:
        current_app.logger.info("Guardian %s logged out", guardian_id)
    return jsonify({"message": "Sesión cerrada exitosamente"}), 200


@auth_bp.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify(current_guardian().to_dict()), 200
