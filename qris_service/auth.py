"""API key allow-list checks."""


def parse_api_keys(raw) -> frozenset:
    """Split a comma separated list of keys, ignoring blanks."""
    if not raw:
        return frozenset()
    return frozenset(key.strip() for key in raw.split(',') if key.strip())


def is_authorized(api_key, allowed_keys) -> bool:
    if not api_key or not allowed_keys:
        return False
    return api_key in allowed_keys
