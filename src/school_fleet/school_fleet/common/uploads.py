from __future__ import annotations

import logging
import os
import uuid
from typing import Iterable, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


def allowed_file(filename: str, allowed_extensions: Iterable[str]) -> bool:
    return "." in filename and filename.rsplit(".", 1)[1].lower() in set(allowed_extensions)


def save_uploaded_file(file: Optional[FileStorage], upload_folder: str) -> Optional[str]:
    """Save an upload under a random name and return its public static path.

    Returns None when no file was sent.
    """
    if not file or not file.filename:
        return None

    ext = os.path.splitext(secure_filename(file.filename))[1].lower()
    filename = f"{uuid.uuid4()}{ext}"
    os.makedirs(upload_folder, exist_ok=True)
    file_path = os.path.join(upload_folder, filename)
    file.save(file_path)
    logger.info("File saved to: %s", file_path)
    return f"/static/uploads/{filename}"
