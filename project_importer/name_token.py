"""
project_importer/name_token.py
-----------------------------------------------------------------------------
Short random identifiers for duplicated screens.

A token is six characters, each drawn independently and uniformly from the
36-symbol alphabet ``0-9A-Z``.  Tokens are *not* guaranteed to be unique:
callers that need uniqueness combine the token with other context (the
destination project) or draw again.
"""

from __future__ import annotations

import random
import secrets
import string

TOKEN_ALPHABET: str = string.digits + string.ascii_uppercase
TOKEN_LENGTH: int = 6


class NameTokenGenerator:
    """
    Draw fresh rename tokens.

    Parameters
    ----------
    rng : Source of randomness.  Defaults to the operating system CSPRNG;
          pass a seeded ``random.Random`` for reproducible draws.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else secrets.SystemRandom()

    def next(self) -> str:
        return "".join(self._rng.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))
