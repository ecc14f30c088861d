import copy

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from burpcert.config import DEFAULT_CONFIG
from burpcert.issuer import CertificateIssuer


@pytest.fixture
def config(tmp_path):
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    cfg['output']['directory'] = str(tmp_path)
    return cfg


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def issued(config):
    """Run the issuer once for an IP and a DNS name and load what it wrote"""
    issuer = CertificateIssuer(config)
    result = issuer.issue("127.0.0.1,example.com")

    with open(result.cert_path, 'rb') as f:
        cert = x509.load_pem_x509_certificate(f.read())
    with open(result.key_path, 'rb') as f:
        key = serialization.load_pem_private_key(f.read(), password=None)
    return result, cert, key
