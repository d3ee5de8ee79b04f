"""
storefront_admin.auth.passwords

Password hashing (bcrypt).
"""

from __future__ import annotations

import asyncio

import bcrypt

# bcrypt only looks at the first 72 bytes of a password.
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


async def hash_password(password: str, *, rounds: int = 12) -> str:
    # Hashing is CPU-bound; keep it off the event loop.
    hashed = await asyncio.to_thread(
        bcrypt.hashpw, password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)
    )
    return hashed.decode("utf-8")


async def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash or password_too_long(password):
        return False
    return await asyncio.to_thread(
        bcrypt.checkpw, password.encode("utf-8"), password_hash.encode("utf-8")
    )
