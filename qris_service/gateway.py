"""Latest incoming QRIS payment lookup on the mutation gateway."""
import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote

import requests

from .errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_GATEWAY_URL = 'https://gateway.okeconnect.com/api/mutasi/qris'


@dataclass(frozen=True)
class Mutation:
    """One incoming payment as reported by the gateway."""

    date: Optional[str]
    brand: Optional[str]
    amount: Optional[str]
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_entry(cls, entry: dict) -> "Mutation":
        return cls(
            date=entry.get('date'),
            brand=entry.get('brand_name') or entry.get('brand'),
            amount=entry.get('amount'),
            raw=dict(entry),
        )

    def as_dict(self) -> dict:
        if self.raw:
            return dict(self.raw)
        return {'date': self.date, 'brand_name': self.brand, 'amount': self.amount}


class MutationGateway:
    def __init__(self, base_url=DEFAULT_GATEWAY_URL, timeout=10, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def latest_mutation(self, merchant_id: str, api_key: str) -> Optional[Mutation]:
        """Return the most recent mutation, or None when there is none."""
        if not merchant_id:
            raise ValueError('merchant_id is required')
        if not api_key:
            raise ValueError('api_key is required')

        merchant = quote(str(merchant_id), safe='')
        key = quote(str(api_key), safe='')
        url = f'{self.base_url}/{merchant}/{key}'
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as exc:
            # the URL carries the gateway key, keep it out of the log
            logger.error("Mutation lookup for merchant %s failed: %s", merchant_id, type(exc).__name__)
            raise UpstreamUnavailable('Could not fetch transaction status from the gateway.') from exc
        except ValueError as exc:
            logger.error("Mutation lookup for merchant %s returned invalid JSON", merchant_id)
            raise UpstreamUnavailable('Gateway returned an invalid response.') from exc

        if not isinstance(body, dict):
            raise UpstreamUnavailable('Gateway returned an invalid response.')
        if not (body.get('success') or body.get('status') == 'success'):
            logger.info("Gateway reported no data for merchant %s", merchant_id)
            return None

        entries = body.get('data') or []
        if not isinstance(entries, list):
            raise UpstreamUnavailable('Gateway returned an invalid response.')
        if not entries:
            return None
        if not isinstance(entries[0], dict):
            logger.error("Mutation lookup for merchant %s returned a malformed entry", merchant_id)
            raise UpstreamUnavailable('Gateway returned an invalid response.')
        return Mutation.from_entry(entries[0])
