"""Resolve Docker-style ``*_FILE`` secrets into plain environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)

SECRET_SUFFIX = "_FILE"


def load_secret_file_variables() -> List[str]:
    """
    Expose the contents of every ``KEY_FILE`` entry as ``KEY``.

    ``DB_PASSWORD_FILE=/run/secrets/mongo`` becomes ``DB_PASSWORD``. A value
    already present for ``KEY`` wins. Unreadable files are logged and skipped.

    Returns:
        Names of the variables that were populated.
    """
    resolved: List[str] = []

    for key, file_path in list(os.environ.items()):
        if not key.endswith(SECRET_SUFFIX) or not file_path:
            continue
        target_key = key[: -len(SECRET_SUFFIX)]
        if os.environ.get(target_key):
            continue
        try:
            os.environ[target_key] = Path(file_path).read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "env.secret_file.load_failed",
                extra={"key": key, "path": file_path, "error": str(exc)},
            )
            continue
        resolved.append(target_key)

    return resolved


load_secret_file_variables()
