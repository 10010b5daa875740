"""
Payment creation: compose the dynamic QRIS string, render it, upload the
image and wrap everything in a transaction record.
"""
import logging
import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .errors import QrisError, RenderFailed, UploadFailed
from .payload import compose_dynamic_payload, normalize_amount

logger = logging.getLogger(__name__)

DEFAULT_EXPIRY_MINUTES = 30


@dataclass(frozen=True)
class Transaction:
    transaction_id: str
    amount: int
    created_at: datetime
    expires_at: datetime
    qr_image_url: str
    qris_string: str

    def as_dict(self) -> dict:
        return {
            'transaction_id': self.transaction_id,
            'amount': self.amount,
            'created_at': self.created_at.isoformat(),
            'expires_at': self.expires_at.isoformat(),
            'qr_image_url': self.qr_image_url,
            'qris_string': self.qris_string,
        }


def generate_transaction_id(prefix: str = 'QRIS') -> str:
    """Build ``PREFIX-<epoch ms>-<8 hex>``."""
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(4).upper()
    return f'{prefix}-{timestamp}-{random_part}'


def create_payment(template, amount, renderer, uploader,
                   expiry_minutes=DEFAULT_EXPIRY_MINUTES, prefix='QRIS',
                   fee=None, now=None) -> Transaction:
    """Create a dynamic QRIS payment.

    ``renderer`` turns the QRIS string into PNG bytes, ``uploader`` is any
    object with an ``upload(bytes) -> url`` method. Either the full record
    is returned or an error is raised.
    """
    amount_value = normalize_amount(amount)
    qris_string = compose_dynamic_payload(template, amount_value, fee=fee)

    try:
        image = renderer(qris_string)
    except QrisError:
        raise
    except Exception as exc:
        raise RenderFailed(f'could not render QR code: {exc}') from exc

    try:
        qr_image_url = uploader.upload(image)
    except QrisError:
        raise
    except Exception as exc:
        raise UploadFailed(f'Failed to upload QR code image: {exc}') from exc

    created_at = now or datetime.now(timezone.utc)
    transaction = Transaction(
        transaction_id=generate_transaction_id(prefix),
        amount=int(amount_value),
        created_at=created_at,
        expires_at=created_at + timedelta(minutes=expiry_minutes),
        qr_image_url=qr_image_url,
        qris_string=qris_string,
    )
    logger.info("Created transaction %s for amount %d", transaction.transaction_id, transaction.amount)
    return transaction
