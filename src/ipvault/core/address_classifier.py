"""Reserved ("bogon") address classification.

An address is a bogon when it falls inside a range that is never routed
on the public internet: private networks, loopback, link-local, blocks
reserved for documentation, multicast, and the 6to4/Teredo encodings of
those blocks. The upstream service can say nothing useful about such
addresses, so lookups for them are answered locally.

Example:
    >>> classifier = AddressClassifier()
    >>> classifier.classify("127.0.0.1")
    True
    >>> classifier.classify("8.8.8.8")
    False
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Iterable, Union

from ipvault.shared.errors import create_invalid_address_error

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


@dataclass(frozen=True)
class ReservedRange:
    """A CIDR block tagged as non-routable.

    Attributes:
        network: Network address and prefix length
        label: Short description of why the block is reserved
    """

    network: IPNetwork
    label: str

    @classmethod
    def from_cidr(cls, cidr: str, label: str) -> ReservedRange:
        """Build a range from CIDR notation such as ``"10.0.0.0/8"``."""
        return cls(ipaddress.ip_network(cidr), label)

    @property
    def version(self) -> int:
        """Address family of the block (4 or 6)."""
        return self.network.version

    def contains(self, address: IPAddress) -> bool:
        """Check membership by masking the address with the block's prefix.

        Addresses of the other family are never contained.
        """
        if address.version != self.network.version:
            return False
        masked = int(address) & int(self.network.netmask)
        return masked == int(self.network.network_address)


# (cidr, label) pairs
_IPV4_RESERVED = (
    ("0.0.0.0/8", "this network"),
    ("10.0.0.0/8", "private"),
    ("100.64.0.0/10", "carrier-grade NAT"),
    ("127.0.0.0/8", "loopback"),
    ("169.254.0.0/16", "link-local"),
    ("172.16.0.0/12", "private"),
    ("192.0.0.0/24", "IETF protocol assignments"),
    ("192.0.2.0/24", "documentation (TEST-NET-1)"),
    ("192.168.0.0/16", "private"),
    ("198.18.0.0/15", "benchmarking"),
    ("198.51.100.0/24", "documentation (TEST-NET-2)"),
    ("203.0.113.0/24", "documentation (TEST-NET-3)"),
    ("224.0.0.0/4", "multicast"),
    ("240.0.0.0/4", "reserved for future use"),
    ("255.255.255.255/32", "limited broadcast"),
)

_IPV6_RESERVED = (
    ("::/128", "unspecified"),
    ("::1/128", "loopback"),
    ("::ffff:0:0/96", "IPv4-mapped"),
    ("::/96", "IPv4-compatible"),
    ("100::/64", "discard-only"),
    ("2001:10::/28", "ORCHID"),
    ("2001:db8::/32", "documentation"),
    ("fc00::/7", "unique local"),
    ("fe80::/10", "link-local"),
    ("fec0::/10", "site-local"),
    ("ff00::/8", "multicast"),
    # 6to4 encodings of IPv4 bogons
    ("2002::/24", "6to4 this network"),
    ("2002:a00::/24", "6to4 private"),
    ("2002:7f00::/24", "6to4 loopback"),
    ("2002:a9fe::/32", "6to4 link-local"),
    ("2002:ac10::/28", "6to4 private"),
    ("2002:c000::/40", "6to4 IETF protocol assignments"),
    ("2002:c000:200::/40", "6to4 documentation"),
    ("2002:c0a8::/32", "6to4 private"),
    ("2002:c612::/31", "6to4 benchmarking"),
    ("2002:c633:6400::/40", "6to4 documentation"),
    ("2002:cb00:7100::/40", "6to4 documentation"),
    ("2002:e000::/20", "6to4 multicast"),
    ("2002:f000::/20", "6to4 reserved for future use"),
    ("2002:ffff:ffff::/48", "6to4 limited broadcast"),
    # Teredo encodings of IPv4 bogons
    ("2001::/40", "Teredo this network"),
    ("2001:0:a00::/40", "Teredo private"),
    ("2001:0:7f00::/40", "Teredo loopback"),
    ("2001:0:a9fe::/48", "Teredo link-local"),
    ("2001:0:ac10::/44", "Teredo private"),
    ("2001:0:c000::/56", "Teredo IETF protocol assignments"),
    ("2001:0:c000:200::/56", "Teredo documentation"),
    ("2001:0:c0a8::/48", "Teredo private"),
    ("2001:0:c612::/47", "Teredo benchmarking"),
    ("2001:0:c633:6400::/56", "Teredo documentation"),
    ("2001:0:cb00:7100::/56", "Teredo documentation"),
    ("2001:0:e000::/36", "Teredo multicast"),
    ("2001:0:f000::/36", "Teredo reserved for future use"),
    ("2001:0:ffff:ffff::/64", "Teredo limited broadcast"),
)

RESERVED_RANGES: tuple[ReservedRange, ...] = tuple(
    ReservedRange.from_cidr(cidr, label)
    for cidr, label in (*_IPV4_RESERVED, *_IPV6_RESERVED)
)


def parse_address(address: str) -> IPAddress:
    """Parse an IPv4 or IPv6 literal.

    Raises:
        InvalidAddressError: If the string is not a valid literal
    """
    if not isinstance(address, str):
        raise create_invalid_address_error(repr(address), operation="parse_address")
    try:
        return ipaddress.ip_address(address)
    except ValueError as e:
        raise create_invalid_address_error(
            address, operation="parse_address", original_error=e
        ) from e


class AddressClassifier:
    """Decides whether an address is inside a reserved range.

    Instances hold no mutable state and may be shared between threads.

    Args:
        ranges: Reserved ranges to consult (default: RESERVED_RANGES)
    """

    def __init__(self, ranges: Iterable[ReservedRange] | None = None) -> None:
        self._ranges: tuple[ReservedRange, ...] = (
            RESERVED_RANGES if ranges is None else tuple(ranges)
        )

    @property
    def ranges(self) -> tuple[ReservedRange, ...]:
        return self._ranges

    def classify(self, address: str | None) -> bool:
        """Return True if ``address`` is a bogon.

        An absent or empty address means "the caller's own address",
        which is never a bogon.

        Raises:
            InvalidAddressError: If ``address`` is not a valid IP literal
        """
        if not address:
            return False
        return self.matching_range(address) is not None

    def matching_range(self, address: str) -> ReservedRange | None:
        """Return the first reserved range containing ``address``, if any.

        Raises:
            InvalidAddressError: If ``address`` is not a valid IP literal
        """
        parsed = parse_address(address)
        for reserved in self._ranges:
            if reserved.contains(parsed):
                return reserved
        return None


_default_classifier = AddressClassifier()


def is_bogon(address: str | None) -> bool:
    """Classify ``address`` against the default reserved range table."""
    return _default_classifier.classify(address)
