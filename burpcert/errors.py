class IssuerError(Exception):
    """Base class for failures while issuing the certificate pair"""

    fatal = True


class ConfigError(Exception):
    """Invalid or unreadable configuration"""


class PreconditionError(IssuerError):
    """Missing or empty host parameter"""


class KeyGenerationError(IssuerError):
    """Key pair or serial number could not be generated"""


class EncodingError(IssuerError):
    """Private key could not be encoded"""


class SigningError(IssuerError):
    """Certificate could not be created or signed"""


class CertificateWriteError(IssuerError):
    """Certificate file could not be opened or written"""


class KeyWriteError(IssuerError):
    """Key file could not be opened or written"""

    # The certificate is already on disk when this happens
    fatal = False

    def __init__(self, message, path=None):
        super().__init__(message)
        self.path = path
