"""Database secret generation.

A candidate is sampled uniformly from the configured alphabet with the
``secrets`` CSPRNG and then run through bcrypt.  The bcrypt string is what
ends up in both ``.env`` files, so the database and the API share the same
literal value.
"""

from __future__ import annotations

import asyncio
import secrets

import bcrypt

from creatif_cli.config import DEFAULT_PASSWORD_ALPHABET, PasswordConfig


def generate_password(length: int = 20, alphabet: str = DEFAULT_PASSWORD_ALPHABET) -> str:
    """Return *length* characters drawn uniformly from *alphabet*."""
    if length < 1:
        raise ValueError("Password length must be positive")
    if not alphabet:
        raise ValueError("Password alphabet must not be empty")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def hash_password(candidate: str, rounds: int = 10) -> str:
    """Hash *candidate* with a fresh bcrypt salt of cost *rounds*."""
    # bcrypt only looks at the first 72 bytes
    digest = bcrypt.hashpw(candidate.encode("utf-8")[:72], bcrypt.gensalt(rounds=rounds))
    return digest.decode("ascii")


async def generate_db_password(config: PasswordConfig | None = None) -> str:
    """Generate and hash a database secret without blocking the event loop."""
    config = config or PasswordConfig()
    candidate = generate_password(config.length, config.alphabet)
    return await asyncio.to_thread(hash_password, candidate, config.rounds)
