"""Property-based tests for address conversion"""
import pytest
from hypothesis import given, strategies as st, settings

from kea_config.services.ip_convert import int_to_ip, ip_to_int


# **Feature: kea-config, Property: Address round-trip**
@given(value=st.integers(min_value=0, max_value=2**32 - 1))
@settings(max_examples=200)
def test_address_roundtrip(value: int):
    """For any 32-bit value, formatting then parsing returns the value."""
    assert ip_to_int(int_to_ip(value)) == value


def test_known_value():
    assert int_to_ip(173218814) == "10.83.27.254"
    assert ip_to_int("10.83.27.254") == 173218814


def test_network_byte_order():
    """Most significant byte is the first octet."""
    assert int_to_ip(0x01020304) == "1.2.3.4"
    assert int_to_ip(0) == "0.0.0.0"
    assert int_to_ip(2**32 - 1) == "255.255.255.255"


@pytest.mark.parametrize("value", [-1, 2**32])
def test_out_of_range(value: int):
    with pytest.raises(ValueError):
        int_to_ip(value)


@pytest.mark.parametrize("address", ["", "1.2.3", "256.0.0.1", "a.b.c.d"])
def test_invalid_address(address: str):
    with pytest.raises(ValueError):
        ip_to_int(address)
