"""
QRIS Microservice - dynamic QRIS generation, CRC16 calculation and
payment status lookup.
"""

from .crc import compute_checksum, crc16_ccitt, verify_checksum
from .errors import (
    InvalidAmount,
    MalformedTemplate,
    QrisError,
    RenderFailed,
    UploadFailed,
    UpstreamUnavailable,
)
from .payload import compose_dynamic_payload

__version__ = "1.0.0"

__all__ = [
    "compose_dynamic_payload",
    "compute_checksum",
    "crc16_ccitt",
    "verify_checksum",
    "QrisError",
    "InvalidAmount",
    "MalformedTemplate",
    "RenderFailed",
    "UploadFailed",
    "UpstreamUnavailable",
]
