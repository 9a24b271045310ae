"""Wire codecs for addresses, market ids and signatures.

Addresses are normalized to EIP-55 checksum form everywhere in the domain.
Market ids are 16 opaque bytes; the persisted and wire form is a
``0x``-prefixed lowercase hex string.
"""

from eth_utils import is_address, to_checksum_address

from src.reg_common.errors import InvalidAddressError, InvalidMarketIdError

MARKET_ID_SIZE = 16
SIGNATURE_SIZE = 65


def normalize_address(value: str) -> str:
    """Return the checksummed form of an address, or raise InvalidAddressError."""
    if not isinstance(value, str) or not is_address(value):
        raise InvalidAddressError(str(value))
    return to_checksum_address(value)


def parse_market_id(value: str | bytes) -> bytes:
    """Accept raw bytes or a 0x-hex string; the id must be 16 non-zero bytes."""
    if isinstance(value, str):
        hex_part = value[2:] if value.startswith(("0x", "0X")) else value
        try:
            raw = bytes.fromhex(hex_part)
        except ValueError:
            raise InvalidMarketIdError(f"not hex: {value}") from None
    else:
        raw = bytes(value)
    if len(raw) != MARKET_ID_SIZE:
        raise InvalidMarketIdError(f"expected {MARKET_ID_SIZE} bytes, got {len(raw)}")
    if raw == bytes(MARKET_ID_SIZE):
        raise InvalidMarketIdError("all-zero id is reserved")
    return raw


def market_id_hex(market_id: bytes) -> str:
    return "0x" + market_id.hex()


def parse_signature(value: str | bytes) -> bytes:
    """Decode a hex signature. Length is checked by the verifier, not here."""
    if isinstance(value, bytes):
        return value
    hex_part = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        return bytes.fromhex(hex_part)
    except ValueError:
        # Undecodable input is treated like any other malformed signature.
        return b""
