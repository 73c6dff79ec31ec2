"""Short identifier generation for URLs."""

import string

import mmh3


class IdentifierGenerator:
    """Derive short identifiers from URL content.

    The identifier is the lowercase hex rendering of the 128-bit MurmurHash3
    (x64 variant, seed 0) of the UTF-8 encoded input, truncated to ``length``
    characters. The same input always yields the same identifier, so
    re-shortening a URL lands on its own key. Two different URLs can share a
    truncated hash; the later write wins.
    """

    HEX_CHARS = frozenset(string.hexdigits.lower())
    DIGEST_HEX_LENGTH = 32

    def __init__(self, length: int = 8):
        """Initialize identifier generator.

        Args:
            length: Number of hex characters kept from the digest (1-32)
        """
        self.length = max(1, min(length, self.DIGEST_HEX_LENGTH))

    def generate(self, content: str) -> str:
        """Generate the short identifier for a URL.

        Args:
            content: The URL (or any string) to hash

        Returns:
            Lowercase hex identifier of ``self.length`` characters
        """
        return self.digest(content)[:self.length]

    @staticmethod
    def digest(content: str) -> str:
        """Full 128-bit digest as 32 hex characters, h1 then h2, big-endian."""
        h1, h2 = mmh3.hash64(content.encode("utf-8"), seed=0, x64arch=True, signed=False)
        return f"{h1:016x}{h2:016x}"

    def is_valid_format(self, identifier: str) -> bool:
        """Check that an identifier has the shape this generator produces."""
        return (
            len(identifier) == self.length
            and all(c in self.HEX_CHARS for c in identifier)
        )


def generate_identifier(content: str) -> str:
    """Generate an 8-character identifier with the default generator."""
    return _default_generator.generate(content)


_default_generator = IdentifierGenerator()
