"""
Request security chain: an explicit pipeline of filters in front of endpoints.
"""

from .middleware import IDENTITY_KEY, CredentialVerifier, PasswordFieldHasher
from .pipeline import Pipeline, RequestContext

__all__ = [
    "Pipeline",
    "RequestContext",
    "CredentialVerifier",
    "PasswordFieldHasher",
    "IDENTITY_KEY",
]
