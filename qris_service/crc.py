"""CRC-16/CCITT-FALSE checksum used by the QRIS tag 63 field."""


def crc16_ccitt(data) -> int:
    """Calculate CRC-16-CCITT checksum"""
    crc = 0xFFFF
    for char in data:
        code = char if isinstance(char, int) else ord(char)
        crc ^= (code & 0xFF) << 8
        for _ in range(8):
            if (crc & 0x8000) != 0:
                crc = ((crc << 1) ^ 0x1021) & 0xFFFF
            else:
                crc = (crc << 1) & 0xFFFF
    return crc & 0xFFFF


def compute_checksum(data) -> str:
    """Return the checksum of ``data`` as 4 uppercase hex digits."""
    return format(crc16_ccitt(data), '04X')


def verify_checksum(qris_string: str) -> bool:
    """Check that the last 4 characters are the CRC of everything before them."""
    if not qris_string or len(qris_string) < 4:
        return False
    provided_crc = qris_string[-4:]
    return provided_crc.upper() == compute_checksum(qris_string[:-4])
