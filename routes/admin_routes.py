from flask import Blueprint, jsonify

from models import Guardian
from utils import admin_required

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')


@admin_bp.route('/guardians', methods=['GET'])
@admin_required
def list_guardians():
    """Every guardian account, without credentials."""
    guardians = Guardian.query.order_by(Guardian.id).all()
    return jsonify([guardian.to_dict() for guardian in guardians]), 200
