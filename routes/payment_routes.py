from flask import Blueprint, current_app, jsonify, request, send_from_directory
from werkzeug.exceptions import NotFound

from extensions import db
from utils import current_guardian, login_required
from utils.audit import fetch_activity
from utils.fees import find_payment, payment_summary, payments_for, record_payment
from utils.receipts import FIELD_NAME, check_receipt, discard_receipt, save_receipt, upload_dir
from utils.validation import validate_receipt_upload

payment_bp = Blueprint('payments', __name__, url_prefix='/api')


@payment_bp.route('/payments', methods=['GET'])
@login_required
def list_payments():
    """All obligations of the logged-in guardian, in calendar order."""
    payments = payments_for(current_guardian().id)
    return jsonify([p.to_dict() for p in payments]), 200


@payment_bp.route('/payments/summary', methods=['GET'])
@login_required
def summary():
    return jsonify(payment_summary(current_guardian().id)), 200


@payment_bp.route('/payments/upload', methods=['POST'])
@login_required
def upload_receipt():
    """Record a payment for one month, optionally with a receipt file.

    The file is only written once the month has been validated; if the
    database update fails the stored file is removed again.
    """
    guardian = current_guardian()
    data = validate_receipt_upload(request.form)
    receipt = check_receipt(request.files.get(FIELD_NAME))

    receipt_url = None
    saved_path = None
    if receipt is not None and find_payment(guardian.id, data['month'], data['year']) is not None:
        receipt_url, saved_path = save_receipt(receipt)

    try:
        payment = record_payment(
            guardian.id,
            data['month'],
            data['year'],
            data['payment_date'],
            data['payment_method'],
            receipt_url=receipt_url,
            amount=data['amount'],
        )
    except Exception:
        db.session.rollback()
        if saved_path is not None:
            discard_receipt(saved_path)
        raise

    return jsonify({
        "message": "Comprobante subido exitosamente",
        "payment": payment.to_dict(),
    }), 200


@payment_bp.route('/uploads/<path:filename>', methods=['GET'])
def uploaded_file(filename):
    try:
        return send_from_directory(upload_dir(), filename)
    except NotFound:
        return jsonify({"message": "Archivo no encontrado"}), 404


@payment_bp.route('/activity', methods=['GET'])
@login_required
def activity():
    logs = fetch_activity(current_guardian().id)
    current_app.logger.debug("Returning %d activity entries", len(logs))
    return jsonify([entry.to_dict() for entry in logs]), 200
