"""IPv4 address <-> uint32 conversion for columns such as next_server."""
import ipaddress


def int_to_ip(value: int) -> str:
    """Render a 32-bit unsigned integer (network byte order) as dotted-quad.

    Raises:
        ValueError: value is outside 0..2**32-1
    """
    if not 0 <= value <= 0xFFFFFFFF:
        raise ValueError(f"Not a 32-bit unsigned value: {value}")
    return str(ipaddress.IPv4Address(value))


def ip_to_int(address: str) -> int:
    """Parse a dotted-quad address into its 32-bit unsigned value."""
    try:
        return int(ipaddress.IPv4Address(address.strip()))
    except ipaddress.AddressValueError as e:
        raise ValueError(f"Invalid IPv4 address: {address}") from e
