"""Identifier generation.

Identifiers are UUIDv4 strings. ``uuid.uuid4`` draws its 122 random bits from
``os.urandom``, so identifiers are unpredictable and need no seeding.
"""

import uuid


def generate_uuid() -> str:
    """Generate a new random UUIDv4 string."""
    return str(uuid.uuid4())


class IdentifierGenerator:
    """Produces unique identifiers for new lands and transactions.

    Attributes:
        prefix: String prepended to every identifier
    """

    def __init__(self, prefix: str = ""):
        self.prefix = prefix

    def next(self) -> str:
        """Return a fresh identifier."""
        return f"{self.prefix}{generate_uuid()}"

    def __call__(self) -> str:
        return self.next()
