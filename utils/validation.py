from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from utils.errors import ValidationFailed

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
ROLES = ("guardian", "admin")
MIN_PASSWORD_LENGTH = 6
MIN_YEAR, MAX_YEAR = 1900, 9999


def _error(field: str, message: str) -> Dict[str, Any]:
    return {"path": [field], "message": message}


def _text(data: Mapping[str, Any], field: str, errors: List[Dict[str, Any]]) -> str:
    raw = data.get(field)
    if raw is None:
        errors.append(_error(field, "Campo requerido"))
        return ""
    if not isinstance(raw, str):
        errors.append(_error(field, "Debe ser texto"))
        return ""
    value = raw.strip()
    if not value:
        errors.append(_error(field, "Campo requerido"))
    return value


def _integer(data: Mapping[str, Any], field: str, errors: List[Dict[str, Any]]) -> Optional[int]:
    raw = data.get(field)
    if isinstance(raw, bool):
        raw = None
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        errors.append(_error(field, "Debe ser un número"))
        return None


def _year(data: Mapping[str, Any], errors: List[Dict[str, Any]]) -> Optional[int]:
    year = _integer(data, "year", errors)
    if year is not None and not MIN_YEAR <= year <= MAX_YEAR:
        errors.append(_error("year", "Año inválido"))
        return None
    return year


def parse_date(value: str) -> datetime:
    """Parse ``YYYY-MM-DD`` or a full ISO-8601 timestamp."""
    value = (value or "").strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        # Stored naive, in UTC
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def validate_registration(data: Mapping[str, Any]) -> Dict[str, Any]:
    errors: List[Dict[str, Any]] = []
    cleaned = {
        "name": _text(data, "name", errors),
        "email": _text(data, "email", errors).lower(),
        "phone": _text(data, "phone", errors),
        "student_name": _text(data, "studentName", errors),
        "student_grade": _text(data, "studentGrade", errors),
    }
    if cleaned["email"] and not EMAIL_RE.match(cleaned["email"]):
        errors.append(_error("email", "Email inválido"))

    password = data.get("password")
    confirm = data.get("confirmPassword")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        errors.append(_error("password", "La contraseña debe tener al menos 6 caracteres"))
    if not isinstance(confirm, str):
        errors.append(_error("confirmPassword", "Campo requerido"))
    elif isinstance(password, str) and password != confirm:
        errors.append(_error("confirmPassword", "Las contraseñas no coinciden"))
    cleaned["password"] = password if isinstance(password, str) else ""

    role = data.get("role")
    if role in (None, ""):
        cleaned["role"] = None
    elif role not in ROLES:
        errors.append(_error("role", "Rol inválido"))
    else:
        cleaned["role"] = role

    if errors:
        raise ValidationFailed(errors)
    return cleaned


def validate_login(data: Mapping[str, Any]) -> Dict[str, Any]:
    errors: List[Dict[str, Any]] = []
    email = data.get("email")
    password = data.get("password")
    if not isinstance(email, str) or not EMAIL_RE.match(email.strip()):
        errors.append(_error("email", "Email inválido"))
    if not isinstance(password, str) or not password:
        errors.append(_error("password", "Por favor ingrese su contraseña"))
    if errors:
        raise ValidationFailed(errors)
    return {"email": email.strip().lower(), "password": password}


def validate_receipt_upload(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Validate the multipart fields of a receipt upload.

    ``amount`` and ``year`` arrive as strings and are coerced to integers.
    The month name is not checked against the calendar here.
    """
    errors: List[Dict[str, Any]] = []
    cleaned: Dict[str, Any] = {
        "month": _text(data, "month", errors),
        "year": _year(data, errors),
        "amount": _integer(data, "amount", errors),
        "payment_method": _text(data, "paymentMethod", errors),
    }
    raw_date = _text(data, "paymentDate", errors)
    if raw_date:
        try:
            cleaned["payment_date"] = parse_date(raw_date)
        except ValueError:
            errors.append(_error("paymentDate", "Fecha inválida"))
    if errors:
        raise ValidationFailed(errors)
    return cleaned
