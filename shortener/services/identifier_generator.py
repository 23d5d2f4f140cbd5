"""
Identifier Generator

Draws random candidate identifiers for new redirects.

Candidates are not guaranteed to be free: the redirect service checks each
one against existing redirects and the word blacklist before using it.
"""

import secrets
import string

from shortener.core.validators import ID_LENGTH

ID_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class IdentifierGenerator:
    """Produces fixed-length base62 identifiers from a CSPRNG."""

    def __init__(self, length: int = ID_LENGTH, alphabet: str = ID_ALPHABET):
        self.length = length
        self.alphabet = alphabet

    def generate(self) -> str:
        return "".join(secrets.choice(self.alphabet) for _ in range(self.length))
