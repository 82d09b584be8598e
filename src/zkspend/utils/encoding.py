"""Encoding and decoding utilities."""

U64_MAX = 2**64 - 1


def bytes_to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string.

    Args:
        data: Bytes to convert

    Returns:
        str: Hexadecimal string with '0x' prefix
    """
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert hexadecimal string to bytes.

    Args:
        hex_str: Hexadecimal string (with or without '0x' prefix)

    Returns:
        bytes: Decoded bytes

    Raises:
        ValueError: If hex string is invalid
    """
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]

    if len(hex_str) % 2 != 0:
        raise ValueError("Hex string must have even number of characters")

    return bytes.fromhex(hex_str)


def is_u64(value: int) -> bool:
    """Check that value is an unsigned 64-bit integer."""
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= U64_MAX


def u64_to_bytes(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as 8 big-endian bytes."""
    return value.to_bytes(8, "big")


def bytes_to_u64(data: bytes) -> int:
    """Decode 8 big-endian bytes as an unsigned 64-bit integer."""
    if len(data) != 8:
        raise ValueError("u64 encoding must be 8 bytes")
    return int.from_bytes(data, "big")
