from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from utils.errors import ReceiptRejected

ALLOWED_MIMETYPES = {"image/jpeg", "image/png", "image/gif", "application/pdf"}
MIMETYPE_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "application/pdf": ".pdf",
}
FIELD_NAME = "receiptFile"
URL_PREFIX = "/api/uploads/"
REJECTED_MESSAGE = "Solo se permiten archivos de imagen (JPG, PNG, GIF) y PDF"


def upload_dir() -> Path:
    target = Path(current_app.config.get("UPLOAD_FOLDER") or os.path.join(os.getcwd(), "uploads"))
    target.mkdir(parents=True, exist_ok=True)
    return target


def allowed_receipt(file: FileStorage) -> bool:
    allowed = current_app.config.get("ALLOWED_RECEIPT_MIMETYPES") or ALLOWED_MIMETYPES
    return (file.mimetype or "").lower() in allowed


def receipt_filename(original: str, mimetype: str) -> str:
    """Unique stored name: field name, UTC timestamp and a random suffix."""
    ext = Path(original or "").suffix.lower() or MIMETYPE_EXTENSIONS.get(mimetype, ".bin")
    stamp = datetime.utcnow().strftime("%Y%m%d%H%M%S%f")
    return secure_filename(f"{FIELD_NAME}-{stamp}-{uuid.uuid4().hex[:12]}{ext}")


def check_receipt(file: Optional[FileStorage]) -> Optional[FileStorage]:
    """Return the upload when one was attached, ``None`` otherwise.

    Raises :class:`ReceiptRejected` for content types we do not store.
    """
    if file is None or not file.filename:
        return None
    if not allowed_receipt(file):
        raise ReceiptRejected(REJECTED_MESSAGE)
    return file


def save_receipt(file: FileStorage) -> tuple[str, Path]:
    """Write ``file`` to the upload folder; returns ``(public_url, path)``."""
    name = receipt_filename(file.filename or "", (file.mimetype or "").lower())
    path = upload_dir() / name
    file.save(path)
    current_app.logger.info("Saved receipt: %s", path)
    return f"{URL_PREFIX}{name}", path


def discard_receipt(path: Path) -> None:
    try:
        path.unlink()
        current_app.logger.info("Removed orphaned receipt: %s", path)
    except FileNotFoundError:
        pass
