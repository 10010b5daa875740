"""
Static to dynamic QRIS conversion.

A QRIS payload is a flat run of tag-length-value fields (``TT LL VALUE``)
closed by the ``6304`` checksum header and 4 hex digits of CRC. Converting a
static code means flipping the point-of-initiation field from ``11`` to
``12``, inserting the amount field (tag 54) right before the ``5802ID``
country field, and recomputing the CRC.
"""

from collections import namedtuple

from .crc import compute_checksum
from .errors import InvalidAmount, MalformedTemplate

MAX_VALUE_LENGTH = 99

TAG_POINT_OF_INITIATION = '01'
TAG_AMOUNT = '54'
TAG_TIP_INDICATOR = '55'
TAG_FIXED_FEE = '56'
TAG_PERCENT_FEE = '57'
TAG_COUNTRY_CODE = '58'

STATIC_MODE = '11'
DYNAMIC_MODE = '12'
FIXED_FEE_INDICATOR = '02'

# Tip and fee settings, replaced only when a new fee is given
FEE_TAGS = frozenset((TAG_TIP_INDICATOR, TAG_FIXED_FEE, TAG_PERCENT_FEE))


class Field(namedtuple('Field', 'tag value')):
    __slots__ = ()

    def encode(self) -> str:
        if len(self.value) > MAX_VALUE_LENGTH:
            raise ValueError(f'value of field {self.tag} is longer than {MAX_VALUE_LENGTH} characters')
        return f'{self.tag}{len(self.value):02d}{self.value}'


ANCHOR = Field(TAG_COUNTRY_CODE, 'ID')


def parse_fields(text: str):
    """Split ``text`` into top-level fields.

    Returns ``(fields, trailer)``. ``trailer`` is a header that closes the
    text without its value, which is what is left of the checksum field once
    the old CRC has been cut off; it is empty otherwise. Nested templates
    (merchant account information and the like) stay opaque values.
    """
    fields = []
    pos = 0
    end = len(text)
    while pos < end:
        header = text[pos:pos + 4]
        if len(header) < 4:
            raise MalformedTemplate(f'dangling data {header!r} at offset {pos}')
        tag, length = header[:2], header[2:]
        if not (length.isascii() and length.isdigit()):
            raise MalformedTemplate(f'field {tag!r} at offset {pos} has invalid length {length!r}')
        start = pos + 4
        stop = start + int(length)
        if stop > end:
            if start == end:
                return fields, header
            raise MalformedTemplate(f'field {tag!r} at offset {pos} is truncated')
        fields.append(Field(tag, text[start:stop]))
        pos = stop
    return fields, ''


def encode_fields(fields) -> str:
    return ''.join(field.encode() for field in fields)


def normalize_amount(amount, name='amount') -> str:
    """Return the decimal string of a positive whole amount.

    Accepts ints, integral floats and ASCII digit strings. Anything that
    would not fit a two digit length prefix is rejected.
    """
    if isinstance(amount, bool):
        raise InvalidAmount(f'{name} must be a number')

    if isinstance(amount, float):
        if not amount.is_integer():
            raise InvalidAmount(f'{name} must be a whole number')
        amount = int(amount)

    if isinstance(amount, int):
        if amount < 1:
            raise InvalidAmount(f'{name} must be positive')
        if amount >= 10 ** MAX_VALUE_LENGTH:
            raise InvalidAmount(f'{name} is longer than {MAX_VALUE_LENGTH} digits')
        return str(amount)

    if isinstance(amount, str):
        digits = amount.strip()
        if not digits or not (digits.isascii() and digits.isdigit()):
            raise InvalidAmount(f'{name} must be numeric')
        digits = digits.lstrip('0')
        if not digits:
            raise InvalidAmount(f'{name} must be positive')
        if len(digits) > MAX_VALUE_LENGTH:
            raise InvalidAmount(f'{name} is longer than {MAX_VALUE_LENGTH} digits')
        return digits

    raise InvalidAmount(f'{name} must be a number')


def _switch_to_dynamic(fields):
    for index, field in enumerate(fields):
        if field.tag != TAG_POINT_OF_INITIATION:
            continue
        if field.value == STATIC_MODE:
            fields[index] = field._replace(value=DYNAMIC_MODE)
        elif field.value != DYNAMIC_MODE:
            raise MalformedTemplate(f'unknown point of initiation method {field.value!r}')
        return fields
    raise MalformedTemplate('point of initiation field (01) is missing')


def compose_dynamic_payload(template: str, amount, fee=None) -> str:
    """Build a dynamic QRIS string for ``amount`` from a static ``template``.

    The last 4 characters of ``template`` are taken to be its old CRC and
    are dropped. A previous amount (tag 54) is replaced. ``fee`` replaces
    any tip or fee settings (tags 55-57) with a fixed convenience fee;
    without it those settings are kept as they are.
    """
    amount_value = normalize_amount(amount)
    fee_value = normalize_amount(fee, 'fee') if fee is not None else None

    if not isinstance(template, str):
        raise MalformedTemplate('template must be a string')
    template = template.strip()
    if len(template) <= 4:
        raise MalformedTemplate('template is too short')

    fields, trailer = parse_fields(template[:-4])
    fields = _switch_to_dynamic(fields)
    fields = [field for field in fields if field.tag != TAG_AMOUNT]
    if fee_value is not None:
        fields = [field for field in fields if field.tag not in FEE_TAGS]

    anchors = [index for index, field in enumerate(fields) if field == ANCHOR]
    if len(anchors) != 1:
        raise MalformedTemplate(f'expected exactly one 5802ID country field, found {len(anchors)}')

    price = [Field(TAG_AMOUNT, amount_value)]
    if fee_value is not None:
        price.append(Field(TAG_TIP_INDICATOR, FIXED_FEE_INDICATOR))
        price.append(Field(TAG_FIXED_FEE, fee_value))
    fields[anchors[0]:anchors[0]] = price

    qris_string = encode_fields(fields) + trailer
    return qris_string + compute_checksum(qris_string)
