"""
IPv4 subnet arithmetic

All values are unsigned 32-bit integers in host order; conversion to and
from the dotted (network byte order) form happens only in
address_to_int / int_to_address.
"""

import ipaddress
from typing import NamedTuple, Optional

from .errors import InvalidAddressError, InvalidFormatError

MAX_UINT32 = 0xFFFFFFFF


class UsableRange(NamedTuple):
    """First and last usable host of a subnet"""
    first: str
    last: str

    @property
    def size(self) -> int:
        return SubnetCalculator.address_to_int(self.last) - SubnetCalculator.address_to_int(self.first) + 1


class SubnetCalculator:
    """CIDR / mask conversions and network boundary calculations"""

    @staticmethod
    def address_to_int(address: str) -> int:
        """
        Convert dotted IPv4 address to an unsigned 32-bit integer

        Only the canonical dotted-quad form is accepted: no surrounding
        whitespace, no zero-padded octets, ASCII digits only.

        Args:
            address: Address such as "192.168.1.10"

        Returns:
            Integer value of the address

        Raises:
            InvalidAddressError: address is not a canonical IPv4 address
        """
        if not isinstance(address, str):
            raise InvalidAddressError(address)

        try:
            ip = ipaddress.IPv4Address(address)
        except ValueError:
            raise InvalidAddressError(address) from None

        # Older interpreters still accept zero-padded octets
        if str(ip) != address:
            raise InvalidAddressError(address)

        return int(ip)

    @staticmethod
    def int_to_address(value: int) -> str:
        """Convert an unsigned 32-bit integer to dotted IPv4 form"""
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_UINT32:
            raise InvalidAddressError(value)
        return str(ipaddress.IPv4Address(value))

    @staticmethod
    def prefix_to_int(prefix_length: int) -> int:
        """Mask with the top prefix_length bits set"""
        if isinstance(prefix_length, bool) or not isinstance(prefix_length, int) \
                or not 0 <= prefix_length <= 32:
            raise InvalidFormatError(f"Prefix length must be 0-32, got {prefix_length!r}", prefix_length)
        return (MAX_UINT32 << (32 - prefix_length)) & MAX_UINT32

    @classmethod
    def mask_from_prefix(cls, prefix_length: int) -> str:
        """
        Build a dotted subnet mask from a prefix length

        Args:
            prefix_length: Number of leading one bits (0-32)

        Returns:
            Mask such as "255.255.255.0"
        """
        return cls.int_to_address(cls.prefix_to_int(prefix_length))

    @classmethod
    def prefix_from_mask(cls, mask: str) -> int:
        """
        Convert a dotted subnet mask to a prefix length

        Raises:
            InvalidFormatError: mask bits are not contiguous
        """
        try:
            value = cls.address_to_int(mask)
        except InvalidAddressError:
            raise InvalidFormatError(f"Invalid subnet mask: {mask!r}", mask)

        inverted = ~value & MAX_UINT32
        # host part must be 2^k - 1
        if inverted & (inverted + 1):
            raise InvalidFormatError(f"Subnet mask is not contiguous: {mask}", mask)

        return 32 - inverted.bit_length()

    @classmethod
    def network_address(cls, address: str, mask: str) -> str:
        return cls.int_to_address(cls.address_to_int(address) & cls.address_to_int(mask))

    @classmethod
    def broadcast_address(cls, address: str, mask: str) -> str:
        mask_int = cls.address_to_int(mask)
        network = cls.address_to_int(address) & mask_int
        return cls.int_to_address(network | (~mask_int & MAX_UINT32))

    @classmethod
    def usable_range(cls, address: str, mask: str) -> Optional[UsableRange]:
        """
        First and last usable host addresses of the subnet

        Args:
            address: Any address inside the subnet
            mask: Dotted subnet mask

        Returns:
            UsableRange, or None when the subnet has no interior hosts (/31, /32)
        """
        mask_int = cls.address_to_int(mask)
        network = cls.address_to_int(address) & mask_int
        broadcast = network | (~mask_int & MAX_UINT32)

        first = network + 1
        last = broadcast - 1
        if first > last:
            return None

        return UsableRange(cls.int_to_address(first), cls.int_to_address(last))
