import datetime
import enum
import logging
import os
import secrets
from dataclasses import dataclass
from typing import Optional

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from burpcert.config import KeyAlgorithm, key_algorithm
from burpcert.errors import (
    CertificateWriteError,
    IssuerError,
    KeyGenerationError,
    KeyWriteError,
    SigningError,
)
from burpcert.hosts import parse_hosts
from burpcert.pkcs8 import legacy_key_pem, marshal_pkcs8, pem_encode

CERT_FILE = 'burpServer.pem'
KEY_FILE = 'burpServer.key'

KEY_FILE_MODE = 0o600
SERIAL_NUMBER_LIMIT = 1 << 128


class Outcome(enum.Enum):
    GENERATED = 'generated'
    SKIPPED = 'skipped'
    PARTIAL = 'partial'     # certificate written, key missing
    FAILED = 'failed'


@dataclass
class IssueResult:
    """What a single issue() call did"""

    outcome: Outcome
    cert_path: str
    key_path: str
    serial_number: Optional[int] = None
    error: Optional[IssuerError] = None

    @property
    def ok(self):
        return self.outcome is not Outcome.FAILED


def public_key_of(private_key):
    """Public half of a supported private key, None for anything else"""
    if isinstance(private_key, (rsa.RSAPrivateKey, ec.EllipticCurvePrivateKey)):
        return private_key.public_key()
    return None


def _generate_rsa(key_config):
    return rsa.generate_private_key(
        public_exponent=key_config['public_exponent'],
        key_size=key_config['size']
    )


KEY_GENERATORS = {
    KeyAlgorithm.RSA: _generate_rsa,
}


class CertificateIssuer:
    def __init__(self, config):
        self.config = config
        directory = config['output']['directory']
        self.cert_path = os.path.join(directory, CERT_FILE)
        self.key_path = os.path.join(directory, KEY_FILE)

        legacy_key = config['output'].get('legacy_key')
        self.legacy_key_path = os.path.join(directory, legacy_key) if legacy_key else None

    def generate_key(self):
        """Generate a fresh private key for the configured algorithm"""
        algorithm = key_algorithm(self.config)
        try:
            return KEY_GENERATORS[algorithm](self.config['key'])
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise KeyGenerationError(f"failed to generate private key: {e}") from e

    def generate_serial(self):
        """Random serial number in [1, 2**128)"""
        try:
            return secrets.randbelow(SERIAL_NUMBER_LIMIT - 1) + 1
        except OSError as e:
            raise KeyGenerationError(f"failed to generate serial number: {e}") from e

    def validity_window(self):
        """Start now (whole seconds, UTC) and run for the configured hours"""
        not_before = datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)
        not_after = not_before + datetime.timedelta(hours=self.config['certificate']['validity_hours'])
        return not_before, not_after

    def build_template(self, hosts, public_key):
        """Certificate builder acting as its own issuer"""
        name = x509.Name([
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, self.config['certificate']['organization']),
        ])
        not_before, not_after = self.validity_window()

        return x509.CertificateBuilder().subject_name(
            name
        ).issuer_name(
            name
        ).public_key(
            public_key
        ).serial_number(
            self.generate_serial()
        ).not_valid_before(
            not_before
        ).not_valid_after(
            not_after
        ).add_extension(
            x509.BasicConstraints(ca=True, path_length=None),
            critical=True,
        ).add_extension(
            x509.KeyUsage(
                digital_signature=True,
                content_commitment=False,
                key_encipherment=True,
                data_encipherment=False,
                key_agreement=False,
                key_cert_sign=True,
                crl_sign=False,
                encipher_only=False,
                decipher_only=False
            ),
            critical=True,
        ).add_extension(
            x509.ExtendedKeyUsage([
                ExtendedKeyUsageOID.SERVER_AUTH,
                ExtendedKeyUsageOID.CLIENT_AUTH,
            ]),
            critical=False,
        ).add_extension(
            x509.SubjectAlternativeName(hosts.general_names()),
            critical=False,
        ).add_extension(
            x509.SubjectKeyIdentifier.from_public_key(public_key),
            critical=False,
        )

    def sign(self, builder, private_key):
        """Self-sign the template with SHA-256"""
        try:
            return builder.sign(private_key, hashes.SHA256())
        except (ValueError, TypeError, UnsupportedAlgorithm) as e:
            raise SigningError(f"Failed to create certificate: {e}") from e

    def write_certificate(self, certificate):
        """Write the certificate as a PEM CERTIFICATE block"""
        try:
            with open(self.cert_path, 'wb') as f:
                f.write(certificate.public_bytes(serialization.Encoding.PEM))
        except OSError as e:
            raise CertificateWriteError(f"failed to open {self.cert_path} for writing: {e}") from e
        logging.info(f"written {self.cert_path}")

    def write_key(self, path, pem):
        """Write a private key PEM readable by the owner only"""
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, KEY_FILE_MODE)
            with os.fdopen(fd, 'wb') as f:
                f.write(pem)
        except OSError as e:
            raise KeyWriteError(f"failed to open {path} for writing: {e}", path=path) from e
        logging.info(f"written {path}")

    def issue(self, host):
        """Create the certificate and key unless the certificate already exists"""
        if os.path.exists(self.cert_path):
            logging.info(f"file {self.cert_path} found no need to generate new key")
            return IssueResult(Outcome.SKIPPED, self.cert_path, self.key_path)

        try:
            hosts = parse_hosts(host)
            logging.info(f"creating new certificates for {len(hosts.dns_names)} DNS name(s) "
                         f"and {len(hosts.ip_addresses)} IP address(es)")

            private_key = self.generate_key()
            pkcs8_pem = pem_encode('PRIVATE KEY', marshal_pkcs8(private_key))
            legacy_pem = legacy_key_pem(private_key) if self.legacy_key_path else None

            builder = self.build_template(hosts, public_key_of(private_key))
            certificate = self.sign(builder, private_key)
            self.write_certificate(certificate)
        except IssuerError as e:
            return IssueResult(Outcome.FAILED, self.cert_path, self.key_path, error=e)

        serial = certificate.serial_number
        try:
            self.write_key(self.key_path, pkcs8_pem)
            if legacy_pem is not None:
                self.write_key(self.legacy_key_path, legacy_pem)
        except KeyWriteError as e:
            logging.error(str(e))
            return IssueResult(Outcome.PARTIAL, self.cert_path, self.key_path,
                               serial_number=serial, error=e)

        return IssueResult(Outcome.GENERATED, self.cert_path, self.key_path, serial_number=serial)
