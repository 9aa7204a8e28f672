"""
Exceptions raised by Ping Networks
"""


class PingNetworksError(Exception):
    """Base class for all package errors"""


class ParseError(PingNetworksError, ValueError):
    """Network specification could not be parsed"""

    def __init__(self, message: str, value=None):
        super().__init__(message)
        self.value = value


class InvalidFormatError(ParseError):
    """Input matches none of the supported specification formats"""


class RangeOrderError(ParseError):
    """Start address of a range is greater than its end address"""

    def __init__(self, start: str, end: str, value=None):
        super().__init__(f"Range start {start} is greater than range end {end}", value)
        self.start = start
        self.end = end


class InvalidOctetError(ParseError):
    """Address octet outside 0-255"""

    def __init__(self, octet: str, value=None):
        super().__init__(f"Invalid octet '{octet}' in '{value}': must be 0-255", value)
        self.octet = octet


class InvalidAddressError(PingNetworksError, ValueError):
    """Malformed IPv4 address handed to the probe engine"""

    def __init__(self, address):
        super().__init__(f"Invalid IPv4 address: {address!r}")
        self.address = address


class ProbeError(PingNetworksError):
    """Probe transport failure (never escapes the engine)"""
