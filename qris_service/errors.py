"""Errors raised by the QRIS service, each mapped to an HTTP status."""


class QrisError(Exception):
    status_code = 500
    error = 'Internal Server Error'


class InvalidAmount(QrisError):
    status_code = 400
    error = 'Invalid amount'


class MalformedTemplate(QrisError):
    status_code = 400
    error = 'Malformed QRIS template'


class Unauthorized(QrisError):
    status_code = 401
    error = 'Unauthorized'


class RenderFailed(QrisError):
    status_code = 500
    error = 'QR rendering failed'


class UploadFailed(QrisError):
    status_code = 502
    error = 'QR image upload failed'


class UpstreamUnavailable(QrisError):
    status_code = 502
    error = 'Payment gateway unavailable'
