import secrets
from random import Random
from typing import Optional

from shortlink.core.config import settings
from shortlink.utils.encoding import BaseNCodec, default_codec


class TokenGenerator:
    """Builds public tokens from store ids.

    A token is the base-N digits of the id, optionally followed by the
    delimiter and random padding so every token is at least ``min_length``
    characters long. Only the part left of the first delimiter carries the id.
    """

    def __init__(
        self,
        codec: BaseNCodec,
        min_length: int,
        delimiter: str,
        rng: Optional[Random] = None,
    ):
        if len(delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        if delimiter in codec.alphabet:
            raise ValueError("delimiter must not be part of the alphabet")
        if min_length < 1:
            raise ValueError("min_length must be at least 1")
        self.codec = codec
        self.min_length = min_length
        self.delimiter = delimiter
        self._rng = rng or secrets.SystemRandom()

    def pad(self, core: str, min_length: Optional[int] = None) -> str:
        """Append the delimiter and random symbols when ``core`` is too short."""
        min_length = self.min_length if min_length is None else min_length
        if len(core) >= min_length:
            return core
        padding = ''.join(
            self._rng.choice(self.codec.alphabet)
            for _ in range(min_length - len(core))
        )
        return f"{core}{self.delimiter}{padding}"

    def generate(self, record_id: int, min_length: Optional[int] = None) -> str:
        return self.pad(self.codec.encode(record_id), min_length)

    def prefix(self, token: str) -> str:
        """The id-carrying part of a token, everything before the first delimiter."""
        return token.split(self.delimiter, 1)[0]

    def extract_id(self, token: str) -> int:
        return self.codec.decode(self.prefix(token))


default_generator = TokenGenerator(
    default_codec,
    min_length=settings.TOKEN_MIN_LENGTH,
    delimiter=settings.TOKEN_DELIMITER,
)
