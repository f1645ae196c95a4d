"""Credential issuance and bearer-token verification service."""

__version__ = "0.1.0"
