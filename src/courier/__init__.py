"""Courier: a small typed HTTP client facade."""

import logging
import os
import sys

from .client import Courier
from .config import CourierSettings, load_settings
from .decoding import decode_json, encode_json
from .dispatch import CompletionQueue, main_queue
from .errors import CourierConfigurationError, CourierError
from .form import CourierFormData
from .mime import sniff_mime_type

# ---------------------------------------------------------------------------
# Configure the package-level logger once.  Child loggers (courier.client,
# courier.config, ...) propagate to a single StreamHandler on stderr.
# ---------------------------------------------------------------------------
_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

_root_logger = logging.getLogger("courier")
if not _root_logger.handlers:
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    _root_logger.addHandler(_handler)
    _root_logger.setLevel(
        _LEVEL_MAP.get(os.environ.get("COURIER_LOG_LEVEL", "WARNING").upper(), logging.WARNING)
    )

__all__ = [
    "CompletionQueue",
    "Courier",
    "CourierConfigurationError",
    "CourierError",
    "CourierFormData",
    "CourierSettings",
    "decode_json",
    "encode_json",
    "load_settings",
    "main_queue",
    "sniff_mime_type",
]
