"""
Parsing of network specifications
"""

import re
import logging
from typing import Any, Dict, Iterable, List, Tuple, Union

from .errors import ParseError, InvalidFormatError, InvalidOctetError
from .models import CIDRSpec, RangeSpec, TraditionalSpec, NetworkSpec
from .subnet import SubnetCalculator

logger = logging.getLogger(__name__)

_ADDRESS = r'([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})\.([0-9]{1,3})'
CIDR_RE = re.compile(rf'^(?P<address>{_ADDRESS})/(?P<prefix>[0-9]{{1,2}})$')
RANGE_RE = re.compile(rf'^(?P<start>{_ADDRESS})-(?P<end>{_ADDRESS})$')
MASK_RE = re.compile(rf'^(?P<address>{_ADDRESS})/(?P<mask>{_ADDRESS})$')
ADDRESS_RE = re.compile(rf'^{_ADDRESS}$')

SPEC_KEYS = ('network', 'spec', 'cidr', 'range')
ADDRESS_KEYS = ('address', 'ip', 'ip_address', 'ipAddress')
MASK_KEYS = ('subnetMask', 'subnet_mask', 'mask')
PREFIX_KEYS = ('prefixLength', 'prefix_length', 'prefix')

SpecInput = Union[str, Dict[str, Any], CIDRSpec, RangeSpec, TraditionalSpec]


class RangeParser:
    """Parser for CIDR, range and address/mask specifications"""

    @classmethod
    def parse(cls, value: SpecInput) -> NetworkSpec:
        """
        Parse a network specification

        Args:
            value: "a.b.c.d/n", "a.b.c.d-e.f.g.h", "a.b.c.d/w.x.y.z",
                a dict with a spec string or address + mask/prefix,
                or an already parsed spec

        Returns:
            CIDRSpec, RangeSpec or TraditionalSpec

        Raises:
            InvalidFormatError: input matches no supported format
            RangeOrderError: range start is greater than range end
            InvalidOctetError: an address octet is outside 0-255
        """
        if isinstance(value, (CIDRSpec, RangeSpec, TraditionalSpec)):
            return value
        if isinstance(value, str):
            return cls._parse_string(value)
        if isinstance(value, dict):
            return cls._parse_mapping(value)

        raise InvalidFormatError(f"Unsupported specification type: {type(value).__name__}", value)

    @classmethod
    def _parse_string(cls, text: str) -> NetworkSpec:
        line = text.strip()
        # tolerate spaces around separators
        line = re.sub(r'\s*/\s*', '/', line)
        line = re.sub(r'\s*-\s*', '-', line)

        match = CIDR_RE.match(line)
        if match:
            address = cls._check_address(match.group('address'), text)
            prefix = int(match.group('prefix'))
            if prefix > 32:
                raise InvalidFormatError(f"Invalid CIDR prefix /{prefix} in '{text}': must be 0-32", text)
            return CIDRSpec(address, prefix)

        match = RANGE_RE.match(line)
        if match:
            start = cls._check_address(match.group('start'), text)
            end = cls._check_address(match.group('end'), text)
            return RangeSpec(start, end)

        match = MASK_RE.match(line)
        if match:
            address = cls._check_address(match.group('address'), text)
            mask = cls._check_address(match.group('mask'), text)
            return TraditionalSpec(address, mask)

        raise InvalidFormatError(f"Unrecognized network specification: '{text}'", text)

    @classmethod
    def _parse_mapping(cls, data: Dict[str, Any]) -> NetworkSpec:
        for key in SPEC_KEYS:
            if isinstance(data.get(key), str):
                return cls._parse_string(data[key])

        address = cls._first(data, ADDRESS_KEYS)
        mask = cls._first(data, MASK_KEYS)
        prefix = cls._first(data, PREFIX_KEYS)

        if not isinstance(address, str) or (mask is None and prefix is None):
            raise InvalidFormatError(
                "Structured specification needs a network string or an address with subnetMask/prefixLength",
                data
            )

        address = cls._check_address(address, data)

        if prefix is not None:
            try:
                prefix = int(prefix)
            except (TypeError, ValueError):
                raise InvalidFormatError(f"Invalid prefix length: {prefix!r}", data)
            if not 0 <= prefix <= 32:
                raise InvalidFormatError(f"Invalid prefix length /{prefix}: must be 0-32", data)

        if mask is None:
            mask = SubnetCalculator.mask_from_prefix(prefix)
        elif not isinstance(mask, str):
            raise InvalidFormatError(f"Invalid subnet mask: {mask!r}", data)
        else:
            mask = cls._check_address(mask, data)

        return TraditionalSpec(address, mask, prefix)

    @staticmethod
    def _first(data: Dict[str, Any], keys: Iterable[str]):
        for key in keys:
            if data.get(key) is not None:
                return data[key]
        return None

    @staticmethod
    def _check_address(address: str, source) -> str:
        """Validate dotted quad octets and return the normalized address"""
        match = ADDRESS_RE.match(address.strip())
        if not match:
            raise InvalidFormatError(f"Invalid IPv4 address '{address}'", source)

        for octet in match.groups():
            if int(octet) > 255:
                raise InvalidOctetError(octet, source)

        return '.'.join(str(int(o)) for o in match.groups())

    @classmethod
    def parse_many(cls, values: Union[str, Iterable[SpecInput]]) -> Tuple[List[NetworkSpec], Dict[str, ParseError]]:
        """
        Parse several specifications, collecting errors instead of stopping

        Args:
            values: Comma separated string or iterable of specifications

        Returns:
            Tuple (parsed specs, {input: error})
        """
        if isinstance(values, str):
            values = [part.strip() for part in values.split(',') if part.strip()]

        specs = []
        errors = {}
        for value in values:
            try:
                specs.append(cls.parse(value))
            except ParseError as e:
                logger.error(f"Cannot parse '{value}': {e}")
                errors[str(value)] = e

        return specs, errors

    @classmethod
    def parse_file(cls, filepath: str) -> Tuple[List[NetworkSpec], Dict[int, ParseError]]:
        """
        Parse a file with one specification per line

        Blank lines and lines starting with '#' are skipped.

        Returns:
            Tuple (parsed specs, {line number: error})
        """
        specs = []
        errors = {}

        with open(filepath, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                try:
                    specs.append(cls.parse(line))
                except ParseError as e:
                    logger.error(f"Line {line_num}: {e}")
                    errors[line_num] = e

        logger.info(f"Read {len(specs)} network specifications from {filepath}")
        return specs, errors

    @staticmethod
    def validate_ip(address: str) -> bool:
        """True if address is a valid dotted IPv4 address"""
        match = ADDRESS_RE.match(address.strip()) if isinstance(address, str) else None
        return bool(match) and all(int(o) <= 255 for o in match.groups())
