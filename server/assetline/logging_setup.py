# assetline/logging_setup.py
from __future__ import annotations

import logging

from assetline.config import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level or LOG_LEVEL)

    # uvicorn --reload может вызвать повторно
    if any(getattr(h, "_assetline", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._assetline = True  # type: ignore[attr-defined]
    root.addHandler(handler)
