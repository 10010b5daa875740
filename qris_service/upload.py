"""Upload of rendered QR images to pixhost."""
import logging

import requests

from .errors import UploadFailed

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_URL = 'https://api.pixhost.to/images'


def direct_link(thumb_url: str) -> str:
    """Turn a pixhost thumbnail URL into the full size image URL.

    ``https://t3.pixhost.to/thumbs/12/abc.png`` is served in full at
    ``https://img3.pixhost.to/images/12/abc.png``.
    """
    return thumb_url.replace('://t', '://img', 1).replace('/thumbs/', '/images/', 1)


class PixhostUploader:
    def __init__(self, endpoint=DEFAULT_UPLOAD_URL, timeout=10, session=None):
        self.endpoint = endpoint
        self.timeout = timeout
        self.session = session or requests.Session()

    def upload(self, image: bytes, filename: str = 'qris-payment.png') -> str:
        """Upload PNG bytes and return a URL the image can be fetched from."""
        try:
            response = self.session.post(
                self.endpoint,
                files={'img': (filename, image, 'image/png')},
                data={'content_type': '0'},
                headers={'Accept': 'application/json'},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            logger.error("Image upload failed: %s", exc)
            raise UploadFailed('Failed to upload QR code image.') from exc
        except ValueError as exc:
            logger.error("Image host returned invalid JSON")
            raise UploadFailed('Image host returned an invalid response.') from exc

        if not isinstance(body, dict):
            raise UploadFailed('Image host returned an invalid response.')
        if body.get('th_url'):
            url = direct_link(body['th_url'])
        elif body.get('show_url'):
            url = body['show_url']
        else:
            logger.error("Image host response has no URL: %s", body)
            raise UploadFailed('Image host did not return an image URL.')

        logger.info("Uploaded %s (%d bytes) to %s", filename, len(image), url)
        return url
