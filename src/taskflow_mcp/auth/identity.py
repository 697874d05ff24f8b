"""
Identity boundary.

IdentityProvider is the port the session talks to. LocalIdentityProvider
keeps accounts as documents in the store's ``users`` collection with
salted PBKDF2-SHA256 password hashes.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import secrets
from typing import Protocol

from taskflow_mcp.backend import TaskFlowBackend
from taskflow_mcp.exceptions import TaskFlowAuthenticationError, TaskFlowValidationError
from taskflow_mcp.models import Principal

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6


class IdentityProvider(Protocol):
    """External authentication service."""

    async def register(self, name: str, email: str, password: str) -> Principal: ...

    async def login(self, email: str, password: str) -> Principal: ...

    async def logout(self) -> None: ...


def hash_password(password: str, salt: bytes, iterations: int) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return digest.hex()


class LocalIdentityProvider:
    """Store-backed email/password accounts."""

    def __init__(self, backend: TaskFlowBackend, *, iterations: int = 200_000) -> None:
        self._backend = backend
        self._iterations = iterations

    @staticmethod
    def _normalize_email(email: str) -> str:
        return (email or "").strip().lower()

    async def register(self, name: str, email: str, password: str) -> Principal:
        email = self._normalize_email(email)
        name = (name or "").strip()

        if not EMAIL_PATTERN.match(email):
            raise TaskFlowValidationError("Invalid email address", operation="register")
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise TaskFlowValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                operation="register",
            )
        if await self._backend.find_account(email) is not None:
            raise TaskFlowValidationError("Email already in use", operation="register")

        salt = secrets.token_bytes(16)
        doc = await self._backend.add_account(
            {
                "email": email,
                "displayName": name or None,
                "salt": salt.hex(),
                "iterations": self._iterations,
                "passwordHash": hash_password(password, salt, self._iterations),
            }
        )
        logger.info("Registered account %s", doc.id)
        return Principal(uid=doc.id, display_name=name or None, email=email)

    async def login(self, email: str, password: str) -> Principal:
        doc = await self._backend.find_account(self._normalize_email(email))
        if doc is None:
            raise TaskFlowAuthenticationError("Invalid email or password", operation="login")

        data = doc.data
        expected = hash_password(
            password or "",
            bytes.fromhex(data["salt"]),
            int(data.get("iterations", self._iterations)),
        )
        if not hmac.compare_digest(expected, data.get("passwordHash", "")):
            raise TaskFlowAuthenticationError("Invalid email or password", operation="login")

        return Principal(uid=doc.id, display_name=data.get("displayName"), email=data.get("email"))

    async def logout(self) -> None:
        return None
