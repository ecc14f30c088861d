import ipaddress
from dataclasses import dataclass, field

from cryptography import x509

from burpcert.errors import PreconditionError


@dataclass
class HostSet:
    """Hosts a certificate is issued for, split into IP literals and DNS names"""

    ip_addresses: list = field(default_factory=list)
    dns_names: list = field(default_factory=list)

    def __len__(self):
        return len(self.ip_addresses) + len(self.dns_names)

    def general_names(self):
        """SubjectAlternativeName entries, DNS names first"""
        names = [x509.DNSName(name) for name in self.dns_names]
        names.extend(x509.IPAddress(ip) for ip in self.ip_addresses)
        return names


def parse_hosts(host):
    """Split a comma separated host list and classify every token.

    Tokens are taken as-is (no whitespace trimming); internationalized
    names must already be in A-label form. A token that parses as an
    IPv4 or IPv6 literal goes to the address list, anything else is a DNS
    name. Empty tokens are dropped; if nothing is left the host parameter is
    considered missing.
    """
    if not host:
        raise PreconditionError("Missing required host parameter")

    hosts = HostSet()
    for token in host.split(','):
        if not token:
            continue
        if not token.isascii():
            raise PreconditionError(f"Host {token!r} must be an IP literal or an ASCII (A-label) DNS name")
        try:
            hosts.ip_addresses.append(ipaddress.ip_address(token))
        except ValueError:
            hosts.dns_names.append(token)

    if not hosts:
        raise PreconditionError(f"Host parameter {host!r} contains no hosts")
    return hosts
