"""Secure notes: password-protected local note store."""

__version__ = "0.1.0"
