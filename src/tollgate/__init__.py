"""Tollgate - user account and authentication service.

Registration, credential verification, session tokens with revocation,
email verification and password reset.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
