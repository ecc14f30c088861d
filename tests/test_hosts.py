import ipaddress

import pytest
from cryptography import x509

from burpcert.errors import PreconditionError
from burpcert.hosts import parse_hosts


def test_ip_and_dns_are_split():
    hosts = parse_hosts("127.0.0.1,example.com")
    assert hosts.ip_addresses == [ipaddress.ip_address("127.0.0.1")]
    assert hosts.dns_names == ["example.com"]


def test_ipv6_literal_is_an_address():
    hosts = parse_hosts("::1,fe80::1,localhost")
    assert hosts.ip_addresses == [ipaddress.ip_address("::1"), ipaddress.ip_address("fe80::1")]
    assert hosts.dns_names == ["localhost"]


def test_order_is_kept():
    hosts = parse_hosts("b.example,10.0.0.2,a.example,10.0.0.1")
    assert hosts.dns_names == ["b.example", "a.example"]
    assert [str(ip) for ip in hosts.ip_addresses] == ["10.0.0.2", "10.0.0.1"]


def test_tokens_are_not_trimmed():
    hosts = parse_hosts("localhost, 127.0.0.1")
    assert hosts.ip_addresses == []
    assert hosts.dns_names == ["localhost", " 127.0.0.1"]


def test_empty_tokens_are_dropped():
    hosts = parse_hosts("localhost,,127.0.0.1,")
    assert len(hosts) == 2


@pytest.mark.parametrize("host", ["", None, ",", ",,,"])
def test_missing_hosts_raise(host):
    with pytest.raises(PreconditionError):
        parse_hosts(host)


def test_general_names():
    names = parse_hosts("127.0.0.1,example.com").general_names()
    assert x509.DNSName("example.com") in names
    assert x509.IPAddress(ipaddress.ip_address("127.0.0.1")) in names
    assert len(names) == 2


def test_unicode_names_are_rejected():
    with pytest.raises(PreconditionError):
        parse_hosts("bücher.example")
    assert parse_hosts("xn--bcher-kva.example").dns_names == ["xn--bcher-kva.example"]
