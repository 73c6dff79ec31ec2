"""Tests for stored record encoding."""

import json

from linkstash.database.models import ClientMetadata, MappingRecord


class TestMappingRecord:
    """Test MappingRecord."""

    def test_new_record_encoding(self):
        """A fresh record carries the URL and a zero count only."""
        record = MappingRecord(original_url="https://example.com")
        assert json.loads(record.encode()) == {"original_url": "https://example.com", "count": 0}

    def test_visited(self):
        """A visit bumps the count and overwrites the client fields."""
        record = MappingRecord(original_url="https://example.com", count=2, os="Windows", device="Chrome")
        visited = record.visited(ClientMetadata(os="Linux", agent="curl"))

        assert visited.count == 3
        assert visited.os == "Linux"
        assert visited.device == "curl"
        assert visited.original_url == record.original_url
        # The original is untouched
        assert record.count == 2

    def test_decode_envelope(self):
        raw = '{"original_url":"https://example.com","count":4,"device":"Firefox","os":"Linux"}'
        record = MappingRecord.decode(raw)
        assert record == MappingRecord("https://example.com", 4, os="Linux", device="Firefox")

    def test_decode_bare_url(self):
        """Values stored before the envelope existed decode as bare URLs."""
        record = MappingRecord.decode("https://legacy.example.com/page")
        assert record.original_url == "https://legacy.example.com/page"
        assert record.count == 0
        assert record.os is None
        assert record.device is None

    def test_decode_json_without_url(self):
        """JSON that is not a record envelope is also treated as a bare value."""
        assert MappingRecord.decode('"just a string"').original_url == '"just a string"'
        assert MappingRecord.decode('{"count": 3}').count == 0

    def test_to_dict_omits_unset_client_fields(self):
        data = MappingRecord(original_url="https://example.com", count=1, os="Linux").to_dict()
        assert data == {"original_url": "https://example.com", "count": 1, "os": "Linux"}
