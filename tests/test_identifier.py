"""Tests for short identifier generation."""

import pytest

from linkstash.identifier import IdentifierGenerator, generate_identifier


class TestIdentifierGenerator:
    """Test IdentifierGenerator."""

    def test_deterministic(self, sample_urls):
        """Same URL always yields the same identifier."""
        generator = IdentifierGenerator()
        for url in sample_urls:
            assert generator.generate(url) == generator.generate(url)

    def test_default_length_and_alphabet(self, sample_urls):
        """Identifiers are 8 lowercase hex characters."""
        generator = IdentifierGenerator()
        for url in sample_urls:
            identifier = generator.generate(url)
            assert len(identifier) == 8
            assert all(c in "0123456789abcdef" for c in identifier)

    def test_empty_input(self):
        """MurmurHash3 of the empty string with seed 0 is all zeros."""
        assert IdentifierGenerator().generate("") == "00000000"
        assert IdentifierGenerator.digest("") == "0" * 32

    def test_known_digest(self):
        """Digest is h1 then h2, each big-endian, like the Go murmur3 Sum128 bytes."""
        assert IdentifierGenerator.digest("hello") == "cbd8a7b341bd9b025b1e906a48ae1d19"
        assert IdentifierGenerator().generate("hello") == "cbd8a7b3"

    def test_identifier_is_digest_prefix(self):
        """The identifier is the leading part of the full digest."""
        url = "https://example.com/some/path"
        digest = IdentifierGenerator.digest(url)
        assert len(digest) == 32
        assert IdentifierGenerator(length=12).generate(url) == digest[:12]

    def test_distinct_urls_differ(self, sample_urls):
        """Different URLs give different identifiers for typical inputs."""
        generator = IdentifierGenerator()
        identifiers = {generator.generate(url) for url in sample_urls}
        assert len(identifiers) == len(sample_urls)

    @pytest.mark.parametrize("length,expected", [(0, 1), (-3, 1), (8, 8), (40, 32)])
    def test_length_is_clamped(self, length, expected):
        """Length is kept within 1..32."""
        assert IdentifierGenerator(length=length).length == expected

    def test_module_function_matches_default(self):
        url = "https://github.com/user/repo"
        assert generate_identifier(url) == IdentifierGenerator().generate(url)

    def test_is_valid_format(self):
        """Only identifiers shaped like generated ones are accepted."""
        generator = IdentifierGenerator()
        assert generator.is_valid_format(generator.generate("https://example.com"))
        assert generator.is_valid_format("0123abcd")
        assert not generator.is_valid_format("0123ABCD")
        assert not generator.is_valid_format("0123abc")
        assert not generator.is_valid_format("0123abcde")
        assert not generator.is_valid_format("xyz12345")
        assert not generator.is_valid_format("")
