"""
Private key encodings.

The PKCS8 container is assembled from pyasn1 types and run through the
generic DER encoder rather than cryptography's PKCS8 serializer:

    PrivateKeyInfo ::= SEQUENCE {
        version              INTEGER,                -- always 0
        privateKeyAlgorithm  AlgorithmIdentifier,    -- rsaEncryption, NULL
        privateKey           OCTET STRING            -- PKCS1 RSAPrivateKey
    }
"""
import base64

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1.codec.der import encoder as der_encoder
from pyasn1.error import PyAsn1Error
from pyasn1.type import namedtype, univ

from burpcert.errors import EncodingError

PKCS8_VERSION = 0
RSA_ENCRYPTION_OID = univ.ObjectIdentifier('1.2.840.113549.1.1.1')

PEM_LINE_LENGTH = 64


class AlgorithmIdentifier(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('algorithm', univ.ObjectIdentifier()),
        namedtype.OptionalNamedType('parameters', univ.Null()),
    )


class PrivateKeyInfo(univ.Sequence):
    componentType = namedtype.NamedTypes(
        namedtype.NamedType('version', univ.Integer()),
        namedtype.NamedType('privateKeyAlgorithm', AlgorithmIdentifier()),
        namedtype.NamedType('privateKey', univ.OctetString()),
    )


def pkcs1_der(private_key):
    """Raw PKCS1 RSAPrivateKey bytes"""
    return private_key.private_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    )


def marshal_pkcs8(private_key):
    """DER encode an RSA private key as a PKCS8 PrivateKeyInfo"""
    if not isinstance(private_key, rsa.RSAPrivateKey):
        raise EncodingError(f"PKCS8 encoding not supported for {type(private_key).__name__}")

    algorithm = AlgorithmIdentifier()
    algorithm['algorithm'] = RSA_ENCRYPTION_OID
    algorithm['parameters'] = univ.Null('')

    info = PrivateKeyInfo()
    info['version'] = PKCS8_VERSION
    info['privateKeyAlgorithm'] = algorithm
    info['privateKey'] = univ.OctetString(pkcs1_der(private_key))

    try:
        return der_encoder.encode(info)
    except PyAsn1Error as e:
        raise EncodingError(f"failed to convert private key to PKCS8: {e}") from e


def pem_encode(block_type, der):
    """Wrap DER bytes in a PEM block"""
    body = base64.b64encode(der).decode('ascii')
    lines = [f'-----BEGIN {block_type}-----']
    lines.extend(body[i:i + PEM_LINE_LENGTH] for i in range(0, len(body), PEM_LINE_LENGTH))
    lines.append(f'-----END {block_type}-----')
    return ('\n'.join(lines) + '\n').encode('ascii')


def legacy_key_pem(private_key):
    """Algorithm specific PEM block (RSA PRIVATE KEY for RSA keys)"""
    if isinstance(private_key, rsa.RSAPrivateKey):
        return pem_encode('RSA PRIVATE KEY', pkcs1_der(private_key))
    raise EncodingError(f"No legacy encoding for {type(private_key).__name__}")
