"""
Boundary and Content-ID token generation.

Every message owns one generator. In random mode each character is drawn
from ``[a-zA-Z0-9]``; the tokens only need to be unique, not unpredictable.
In deterministic mode tokens are a fixed prefix followed by a zero-padded
counter, which makes rendered messages byte-reproducible.
"""

import logging
import random
import string
from typing import Optional

from ..exceptions import TokenGenerationError

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits

CONTENT_ID_LENGTH = 52
BOUNDARY_LENGTH = 20


class IDGenerator:
    """
    Produces boundary and Content-ID tokens for a single message.

    Usage:
        >>> ids = IDGenerator(prefix="ATTACH_")
        >>> ids.next_token(12)
        'ATTACH_00001'

    Attributes:
        prefix: Deterministic prefix, or None for random tokens.
    """

    def __init__(self, prefix: Optional[str] = None) -> None:
        """
        Initialize the generator.

        Args:
            prefix: When given, tokens are ``prefix`` plus a zero-padded
                counter starting at 1. When None, tokens are random.
        """
        self.prefix = prefix
        self.issued = 0
        self._counter = 0
        self._random = random.Random()

    @property
    def deterministic(self) -> bool:
        """Check if tokens are generated from a prefix and counter."""
        return self.prefix is not None

    def next_token(self, length: int) -> str:
        """
        Return a new token of exactly ``length`` characters.

        Raises:
            TokenGenerationError: If the prefix plus counter does not fit.
        """
        self.issued += 1
        if not self.deterministic:
            return "".join(self._random.choice(TOKEN_ALPHABET) for _ in range(length))

        self._counter += 1
        digits = str(self._counter)
        if len(self.prefix) + len(digits) > length:
            raise TokenGenerationError(self.prefix, self._counter, length)
        return self.prefix + digits.zfill(length - len(self.prefix))

    def next_content_id(self) -> str:
        return self.next_token(CONTENT_ID_LENGTH)

    def next_boundary(self) -> str:
        return self.next_token(BOUNDARY_LENGTH)
