from shortlink.core.config import settings
from shortlink.core.exceptions import InvalidCharacterError


class BaseNCodec:
    """Converts non-negative integers to and from a fixed alphabet.

    The alphabet is fixed at construction; its length is the base. Encoding is
    deterministic and has no side effects, so ``decode(encode(n)) == n`` holds
    for every ``n >= 0``.
    """

    def __init__(self, alphabet: str):
        if len(alphabet) < 2:
            raise ValueError("alphabet needs at least 2 symbols")
        if len(set(alphabet)) != len(alphabet):
            raise ValueError("alphabet contains duplicate symbols")
        self._alphabet = alphabet
        self._index = {ch: i for i, ch in enumerate(alphabet)}

    @property
    def alphabet(self) -> str:
        return self._alphabet

    @property
    def base(self) -> int:
        return len(self._alphabet)

    def encode(self, num: int) -> str:
        if num < 0:
            raise ValueError("only non-negative integers can be encoded")
        if num == 0:
            return self._alphabet[0]
        out = []
        while num:
            num, rem = divmod(num, self.base)
            out.append(self._alphabet[rem])
        return ''.join(reversed(out))

    def decode(self, s: str) -> int:
        n = 0
        for ch in s:
            try:
                n = n * self.base + self._index[ch]
            except KeyError:
                raise InvalidCharacterError(ch) from None
        return n

    def is_encoded(self, s: str) -> bool:
        """True when every character of ``s`` belongs to the alphabet."""
        return all(ch in self._index for ch in s)


default_codec = BaseNCodec(settings.TOKEN_ALPHABET)
