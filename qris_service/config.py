"""Service settings, read from the environment (and a local .env file)."""
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .auth import parse_api_keys
from .gateway import DEFAULT_GATEWAY_URL
from .transaction import DEFAULT_EXPIRY_MINUTES
from .upload import DEFAULT_UPLOAD_URL

load_dotenv()


def _int_env(name, default):
    value = os.getenv(name)
    if value is None or value.strip() == '':
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f'{name} must be an integer, got {value!r}') from None


@dataclass(frozen=True)
class Settings:
    host: str = '0.0.0.0'
    port: int = 33416
    api_keys: frozenset = field(default_factory=frozenset)
    static_code: str = ''
    expiry_minutes: int = DEFAULT_EXPIRY_MINUTES
    transaction_prefix: str = 'QRIS'
    gateway_url: str = DEFAULT_GATEWAY_URL
    upload_url: str = DEFAULT_UPLOAD_URL
    http_timeout: int = 10
    log_level: str = 'INFO'

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            host=os.getenv('QRIS_SERVICE_HOST', '0.0.0.0'),
            port=_int_env('QRIS_SERVICE_PORT', 33416),
            api_keys=parse_api_keys(os.getenv('QRIS_API_KEYS')),
            static_code=os.getenv('QRIS_STATIC_CODE', '').strip(),
            expiry_minutes=_int_env('QRIS_EXPIRY_MINUTES', DEFAULT_EXPIRY_MINUTES),
            transaction_prefix=os.getenv('QRIS_TRANSACTION_PREFIX', 'QRIS'),
            gateway_url=os.getenv('QRIS_GATEWAY_URL', DEFAULT_GATEWAY_URL),
            upload_url=os.getenv('QRIS_UPLOAD_URL', DEFAULT_UPLOAD_URL),
            http_timeout=_int_env('QRIS_HTTP_TIMEOUT', 10),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        )
