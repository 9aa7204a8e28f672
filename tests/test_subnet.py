# tests/test_subnet.py
import pytest

from ping_networks.errors import InvalidAddressError, InvalidFormatError
from ping_networks.subnet import SubnetCalculator


def test_mask_from_prefix():
    assert SubnetCalculator.mask_from_prefix(24) == "255.255.255.0"
    assert SubnetCalculator.mask_from_prefix(0) == "0.0.0.0"
    assert SubnetCalculator.mask_from_prefix(32) == "255.255.255.255"
    assert SubnetCalculator.mask_from_prefix(19) == "255.255.224.0"


def test_mask_from_prefix_out_of_range():
    with pytest.raises(InvalidFormatError):
        SubnetCalculator.mask_from_prefix(33)
    with pytest.raises(InvalidFormatError):
        SubnetCalculator.mask_from_prefix(-1)


def test_prefix_from_mask():
    assert SubnetCalculator.prefix_from_mask("255.255.255.0") == 24
    assert SubnetCalculator.prefix_from_mask("255.255.255.252") == 30
    assert SubnetCalculator.prefix_from_mask("0.0.0.0") == 0
    assert SubnetCalculator.prefix_from_mask("255.255.255.255") == 32


def test_prefix_from_non_contiguous_mask():
    with pytest.raises(InvalidFormatError):
        SubnetCalculator.prefix_from_mask("255.0.255.0")


def test_address_conversion_high_addresses_stay_unsigned():
    assert SubnetCalculator.address_to_int("255.255.255.255") == 0xFFFFFFFF
    assert SubnetCalculator.address_to_int("128.0.0.1") == 0x80000001
    assert SubnetCalculator.int_to_address(0x80000001) == "128.0.0.1"


@pytest.mark.parametrize("address", ["10.0.0", "10.0.0.256", "a.b.c.d", "", "10.0.0.1.2"])
def test_address_to_int_rejects_malformed(address):
    with pytest.raises(InvalidAddressError):
        SubnetCalculator.address_to_int(address)


@pytest.mark.parametrize("address", [" 10.0.0.1", "10.0.0.1\n", "010.000.000.001", "10.0.0.01",
                                     "١٠.0.0.1", "10.0.0.１"])
def test_address_to_int_rejects_non_canonical(address):
    with pytest.raises(InvalidAddressError):
        SubnetCalculator.address_to_int(address)


@pytest.mark.parametrize("value", [-1, 0x100000000, True, "10"])
def test_int_to_address_rejects_out_of_range(value):
    with pytest.raises(InvalidAddressError):
        SubnetCalculator.int_to_address(value)


def test_network_and_broadcast():
    assert SubnetCalculator.network_address("192.168.1.77", "255.255.255.0") == "192.168.1.0"
    assert SubnetCalculator.broadcast_address("192.168.1.77", "255.255.255.0") == "192.168.1.255"
    assert SubnetCalculator.broadcast_address("10.1.2.3", "255.0.0.0") == "10.255.255.255"


def test_usable_range_slash_24():
    usable = SubnetCalculator.usable_range("192.168.1.0", "255.255.255.0")
    assert usable.first == "192.168.1.1"
    assert usable.last == "192.168.1.254"
    assert usable.size == 254


def test_usable_range_slash_30_has_two_hosts():
    usable = SubnetCalculator.usable_range("10.0.0.4", "255.255.255.252")
    assert (usable.first, usable.last) == ("10.0.0.5", "10.0.0.6")
    assert usable.size == 2


@pytest.mark.parametrize("mask", ["255.255.255.254", "255.255.255.255"])
def test_usable_range_slash_31_and_32_are_empty(mask):
    assert SubnetCalculator.usable_range("10.0.0.1", mask) is None


def test_usable_range_edge_of_address_space():
    assert SubnetCalculator.usable_range("255.255.255.255", "255.255.255.255") is None
    assert SubnetCalculator.usable_range("0.0.0.0", "255.255.255.255") is None
    usable = SubnetCalculator.usable_range("255.255.255.0", "255.255.255.0")
    assert usable.last == "255.255.255.254"
