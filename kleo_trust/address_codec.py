"""
Address codec module.

Converts between the two encodings the chain uses for the same account:

- H160 ("short"): 20 bytes, hex, the contract-space address ink! contracts see.
- SS58 ("network"): 32-byte account id, base58 with a prefix byte and a
  blake2b checksum, the form wallet extensions show.

H160 -> SS58 right-pads with zero bytes; SS58 -> H160 keeps the first 20 bytes,
so only H160 -> SS58 -> H160 is guaranteed to round-trip.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Optional, Tuple

import base58
from web3 import Web3

from .constants import (
    ACCOUNT_ID_BYTES,
    ASSET_HUB_SS58_PREFIX,
    H160_BYTES,
    HEX_ADDRESS_PATTERN,
    SS58_CHECKSUM_PREFIX,
)
from .errors import InvalidFormat
from .logging_utils import get_logger

logger = get_logger("address_codec")

# Payload sizes the SS58 format allows: account indices and 32/33-byte keys
_SS58_PAYLOAD_LENGTHS = (1, 2, 4, 8, 32, 33)
_MAX_SS58_PREFIX = 16383


@dataclass(frozen=True)
class AddressDescription:
    short: str
    network: str
    short_display: str


def _sanitize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    trimmed = str(value).strip()
    return trimmed or None


def _ss58_checksum(data: bytes) -> bytes:
    return hashlib.blake2b(SS58_CHECKSUM_PREFIX + data, digest_size=64).digest()


def _encode_prefix(prefix: int) -> bytes:
    if prefix < 64:
        return bytes([prefix])
    first = ((prefix & 0b1111_1100) >> 2) | 0b0100_0000
    second = (prefix >> 8) | ((prefix & 0b0000_0011) << 6)
    return bytes([first, second])


def _decode_prefix(data: bytes) -> Tuple[int, int]:
    """Return (prefix, prefix_length) for raw SS58 bytes."""
    head = data[0]
    if head & 0b1000_0000:
        raise InvalidFormat(f"Reserved SS58 prefix byte: {head}")
    if head & 0b0100_0000:
        if len(data) < 2:
            raise InvalidFormat("SS58 data too short for a two-byte prefix")
        second = data[1]
        prefix = ((head & 0b0011_1111) << 2) | (second >> 6) | ((second & 0b0011_1111) << 8)
        return prefix, 2
    return head, 1


def validate_ss58_prefix(prefix: int) -> int:
    if isinstance(prefix, bool) or not isinstance(prefix, int):
        raise InvalidFormat(f"SS58 prefix must be an integer: {prefix!r}", prefix)
    # 46 and 47 are reserved by the SS58 registry
    if not 0 <= prefix <= _MAX_SS58_PREFIX or prefix in (46, 47):
        raise InvalidFormat(f"Unsupported SS58 prefix: {prefix}", prefix)
    return prefix


def ss58_encode(payload: bytes, prefix: int = ASSET_HUB_SS58_PREFIX) -> str:
    """Checksum-encode ``payload`` under the network ``prefix``."""
    validate_ss58_prefix(prefix)
    if len(payload) not in _SS58_PAYLOAD_LENGTHS:
        raise InvalidFormat(f"Unsupported SS58 payload length: {len(payload)}", payload)

    body = _encode_prefix(prefix) + payload
    checksum_length = 2 if len(payload) in (32, 33) else 1
    return base58.b58encode(body + _ss58_checksum(body)[:checksum_length]).decode("ascii")


def ss58_decode(address: str) -> Tuple[int, bytes]:
    """Decode an SS58 string into (prefix, payload), verifying its checksum."""
    try:
        data = base58.b58decode(address)
    except ValueError as exc:
        raise InvalidFormat(f"Invalid SS58 address: {address}", address) from exc
    if len(data) < 2:
        raise InvalidFormat(f"Invalid SS58 address: {address}", address)

    prefix, prefix_length = _decode_prefix(data)
    body_length = len(data) - prefix_length
    checksum_length = 2 if body_length in (34, 35) else 1
    payload = data[prefix_length:-checksum_length]
    if len(payload) not in _SS58_PAYLOAD_LENGTHS:
        raise InvalidFormat(f"Invalid SS58 payload length in {address}", address)

    expected = _ss58_checksum(data[:-checksum_length])[:checksum_length]
    if data[-checksum_length:] != expected:
        raise InvalidFormat(f"Invalid SS58 checksum: {address}", address)
    return prefix, payload


def is_short_address(value: Optional[str]) -> bool:
    sanitized = _sanitize(value)
    return bool(sanitized and HEX_ADDRESS_PATTERN.match(sanitized))


def normalize_short_address(value: Optional[str]) -> Optional[str]:
    """Return ``value`` as a lowercase ``0x``-prefixed H160, or None if it is not one."""
    if not is_short_address(value):
        return None
    sanitized = _sanitize(value)
    if sanitized[:2] in ("0x", "0X"):
        sanitized = sanitized[2:]
    return f"0x{sanitized.lower()}"


class AddressCodec:
    """
    H160 <-> SS58 conversion bound to one network prefix.
    """

    def __init__(self, ss58_prefix: int = ASSET_HUB_SS58_PREFIX):
        self.ss58_prefix = validate_ss58_prefix(ss58_prefix)

    def _ensure_short(self, value: Optional[str]) -> str:
        sanitized = _sanitize(value)
        if not sanitized:
            raise InvalidFormat("H160 address is required", value)
        normalized = normalize_short_address(sanitized)
        if normalized is None:
            raise InvalidFormat(f"Invalid hex address: {sanitized}", value)
        return normalized

    def to_network_address(self, short_hex: Optional[str]) -> str:
        """Convert an H160 to SS58 by padding it with zeros on the right."""
        normalized = self._ensure_short(short_hex)
        account_bytes = Web3.to_bytes(hexstr=normalized)
        padded = account_bytes.ljust(ACCOUNT_ID_BYTES, b"\x00")
        return ss58_encode(padded, self.ss58_prefix)

    def to_short_address(self, network_address: Optional[str]) -> str:
        """Convert an SS58 address to H160 (its first 20 bytes)."""
        sanitized = _sanitize(network_address)
        if not sanitized:
            raise InvalidFormat("SS58 address is required", network_address)

        _, payload = ss58_decode(sanitized)
        if len(payload) < H160_BYTES:
            raise InvalidFormat("SS58 payload shorter than 20 bytes", network_address)
        return Web3.to_hex(payload[:H160_BYTES]).lower()

    def addresses_match(
        self, network_address: Optional[str], short_address: Optional[str]
    ) -> bool:
        if not network_address or not short_address:
            return False
        try:
            return self.to_short_address(network_address) == self._ensure_short(short_address)
        except InvalidFormat as exc:
            logger.debug("Address comparison failed: %s", exc)
            return False

    def describe(self, address: Optional[str]) -> AddressDescription:
        sanitized = _sanitize(address)
        if not sanitized:
            raise InvalidFormat("Address is required", address)

        if sanitized[:2] in ("0x", "0X") or is_short_address(sanitized):
            short = self._ensure_short(sanitized)
            network = self.to_network_address(short)
        else:
            network = sanitized
            short = self.to_short_address(network)

        return AddressDescription(
            short=short,
            network=network,
            short_display=f"{network[:6]}...{network[-4:]}",
        )

    def display_address(self, address: Optional[str]) -> str:
        """Truncated SS58 form for rendering; falls back to the raw input."""
        try:
            return self.describe(address).short_display
        except InvalidFormat as exc:
            logger.debug("Displaying raw address: %s", exc)
            return "" if address is None else str(address)


_default_codec = AddressCodec()


def to_network_address(short_hex: Optional[str]) -> str:
    return _default_codec.to_network_address(short_hex)


def to_short_address(network_address: Optional[str]) -> str:
    return _default_codec.to_short_address(network_address)


def addresses_match(network_address: Optional[str], short_address: Optional[str]) -> bool:
    return _default_codec.addresses_match(network_address, short_address)


def describe(address: Optional[str]) -> AddressDescription:
    return _default_codec.describe(address)


def display_address(address: Optional[str]) -> str:
    return _default_codec.display_address(address)
