"""QR Code rendering for finished QRIS strings."""
import io
import logging

import qrcode

from .errors import RenderFailed

logger = logging.getLogger(__name__)


def render_qr_png(qris_string: str, box_size: int = 10, border: int = 4) -> bytes:
    """Render ``qris_string`` as a PNG QR code and return the image bytes."""
    if not qris_string:
        raise RenderFailed('nothing to render')
    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=box_size,
            border=border,
        )
        qr.add_data(qris_string)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")
        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
    except Exception as exc:
        logger.exception("QR rendering failed")
        raise RenderFailed(f'could not render QR code: {exc}') from exc
    return buffer.getvalue()
