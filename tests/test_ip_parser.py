# tests/test_ip_parser.py
import pytest

from ping_networks.errors import InvalidFormatError, InvalidOctetError, ParseError, RangeOrderError
from ping_networks.ip_parser import RangeParser
from ping_networks.models import CIDRSpec, RangeSpec, TraditionalSpec


def test_parse_cidr():
    spec = RangeParser.parse("10.0.0.0/24")
    assert spec == CIDRSpec("10.0.0.0", 24)
    assert spec.kind == "cidr"
    assert spec.subnet_mask == "255.255.255.0"


def test_parse_range():
    spec = RangeParser.parse("10.0.0.1-10.0.0.5")
    assert spec == RangeSpec("10.0.0.1", "10.0.0.5")
    assert spec.kind == "range"


def test_parse_range_reversed():
    with pytest.raises(RangeOrderError) as exc_info:
        RangeParser.parse("10.0.0.5-10.0.0.1")
    assert exc_info.value.start == "10.0.0.5"
    assert exc_info.value.end == "10.0.0.1"
    assert isinstance(exc_info.value, ParseError)


def test_parse_range_compares_unsigned():
    spec = RangeParser.parse("127.255.255.255-128.0.0.1")
    assert spec.size == 3


def test_parse_tolerates_whitespace():
    assert RangeParser.parse("  192.168.1.0 / 24 ") == CIDRSpec("192.168.1.0", 24)
    assert RangeParser.parse("10.0.0.1 - 10.0.0.3") == RangeSpec("10.0.0.1", "10.0.0.3")


def test_parse_dotted_mask():
    spec = RangeParser.parse("192.168.2.0/255.255.255.0")
    assert isinstance(spec, TraditionalSpec)
    assert spec.subnet_mask == "255.255.255.0"


@pytest.mark.parametrize("value", ["10.0.0.0/33", "10.0.0.0/100", "hello", "10.0.0.1", "10.0.0/24", "",
                                   "١٠.0.0.0/24"])
def test_parse_invalid_format(value):
    with pytest.raises(InvalidFormatError):
        RangeParser.parse(value)


def test_parse_invalid_octet():
    with pytest.raises(InvalidOctetError) as exc_info:
        RangeParser.parse("10.0.300.0/24")
    assert exc_info.value.octet == "300"

    with pytest.raises(InvalidOctetError):
        RangeParser.parse("10.0.0.1-10.0.0.256")


def test_parse_structured_spec_string():
    assert RangeParser.parse({"network": "10.0.0.0/30"}) == CIDRSpec("10.0.0.0", 30)
    assert RangeParser.parse({"range": "10.0.0.1-10.0.0.2"}) == RangeSpec("10.0.0.1", "10.0.0.2")


def test_parse_structured_prefix_only():
    spec = RangeParser.parse({"address": "172.16.0.0", "prefixLength": 16})
    assert spec == TraditionalSpec("172.16.0.0", "255.255.0.0", 16)


def test_parse_structured_mask_only():
    spec = RangeParser.parse({"address": "172.16.5.0", "subnetMask": "255.255.255.0"})
    assert spec.kind == "traditional"
    assert spec.prefix_length is None


def test_parse_structured_inconsistent_mask_and_prefix():
    with pytest.raises(InvalidFormatError):
        RangeParser.parse({"address": "172.16.5.0", "subnetMask": "255.255.255.0", "prefixLength": 16})


def test_parse_structured_missing_fields():
    with pytest.raises(InvalidFormatError):
        RangeParser.parse({"address": "172.16.5.0"})
    with pytest.raises(InvalidFormatError):
        RangeParser.parse({"foo": "bar"})


def test_parse_unsupported_type():
    with pytest.raises(InvalidFormatError):
        RangeParser.parse(42)


def test_parse_is_repeatable():
    assert RangeParser.parse("10.1.0.0/16") == RangeParser.parse("10.1.0.0/16")


def test_parse_passes_through_parsed_spec():
    spec = CIDRSpec("10.0.0.0", 8)
    assert RangeParser.parse(spec) is spec


def test_parse_many_collects_errors():
    specs, errors = RangeParser.parse_many("10.0.0.0/30, bogus, 10.0.0.9-10.0.0.8")
    assert specs == [CIDRSpec("10.0.0.0", 30)]
    assert set(errors) == {"bogus", "10.0.0.9-10.0.0.8"}
    assert isinstance(errors["10.0.0.9-10.0.0.8"], RangeOrderError)


def test_parse_file(tmp_path):
    path = tmp_path / "networks.txt"
    path.write_text("# lab networks\n\n10.0.0.0/30\n10.0.0.300/24\n192.168.1.1-192.168.1.4\n", encoding="utf-8")

    specs, errors = RangeParser.parse_file(str(path))

    assert specs == [CIDRSpec("10.0.0.0", 30), RangeSpec("192.168.1.1", "192.168.1.4")]
    assert list(errors) == [4]


def test_validate_ip():
    assert RangeParser.validate_ip("8.8.8.8")
    assert not RangeParser.validate_ip("8.8.8.256")
    assert not RangeParser.validate_ip("8.8.8")
    assert not RangeParser.validate_ip("١٠.0.0.1")
