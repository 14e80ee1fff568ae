"""Credential validation and role assumption."""

from .resolver import DEFAULT_ROLE_SESSION_NAME, CredentialResolver

__all__ = ["DEFAULT_ROLE_SESSION_NAME", "CredentialResolver"]
