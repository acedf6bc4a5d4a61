from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar, Any, Optional, cast
from flask import g, jsonify, session

from extensions import db
from models import Guardian

F = TypeVar("F", bound=Callable[..., Any])

_UNSET = object()


def current_guardian() -> Optional[Guardian]:
    """Return the guardian authenticated for this request, or ``None``.

    The session cookie only carries ``guardian_id``. It is re-validated against
    the database once per request and the result is cached on ``flask.g``;
    an id that no longer resolves clears the session.
    """
    cached = g.get("current_guardian", _UNSET)
    if cached is not _UNSET:
        return cached

    guardian = None
    guardian_id = session.get("guardian_id")
    if guardian_id is not None:
        guardian = db.session.get(Guardian, guardian_id)
        if guardian is None:
            session.clear()
    g.current_guardian = guardian
    return guardian


def login_required(func: F) -> F:
    """Reject the request with 401 unless a guardian is logged in."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        if current_guardian() is None:
            return jsonify({"message": "No autorizado"}), 401
        return func(*args, **kwargs)

    return cast(F, wrapper)


def admin_required(func: F) -> F:
    """Decorator that requires an admin session.

    - Anonymous requests get 401.
    - Logged-in guardians without the ``admin`` role get 403.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        guardian = current_guardian()
        if guardian is None:
            return jsonify({"message": "No autorizado"}), 401
        if not guardian.is_admin:
            return jsonify({"message": "Acceso prohibido: requiere permisos de administrador"}), 403
        return func(*args, **kwargs)

    return cast(F, wrapper)
