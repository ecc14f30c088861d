"""
Burp Team Server certificate issuer

Generates a self-signed, CA-capable TLS certificate and PKCS8 private key for a
local Burp team server so it can serve HTTPS without an external authority.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from .issuer import CertificateIssuer, IssueResult, Outcome

__all__ = ["CertificateIssuer", "IssueResult", "Outcome"]
