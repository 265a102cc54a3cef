import struct

import pytest

from conftest import vorbis_payload
from flac_tagger.blocks import VorbisCommentBlock
from flac_tagger.comments import CommentMultimap
from flac_tagger.errors import DecodeError


def _multimap(*entries):
    return CommentMultimap.from_block(VorbisCommentBlock(vorbis_payload(entries)))


class TestSet:
    """Tests for the case-insensitive, single-entry write path."""

    def test_appends_new_key(self):
        comments = CommentMultimap()
        comments.set("TITLE", "Song")
        assert list(comments) == ["TITLE=Song"]

    def test_empty_value_is_noop(self):
        comments = _multimap("TITLE=Old")
        comments.set("TITLE", "")
        assert list(comments) == ["TITLE=Old"]

    def test_replaces_all_case_variants_and_moves_to_end(self):
        comments = _multimap("title=a", "ARTIST=b", "Title=c", "ALBUM=d")
        comments.set("TITLE", "new")
        assert list(comments) == ["ARTIST=b", "ALBUM=d", "TITLE=new"]

    def test_uniqueness_after_many_sets(self):
        comments = _multimap("ARTIST=x", "artist=y")
        for value in ["1", "2", "3"]:
            comments.set("Artist", value)
            comments.set("TITLE", value * 2)
        assert list(comments) == ["Artist=3", "TITLE=33"]

    def test_does_not_touch_key_prefixes(self):
        comments = _multimap("ALBUMARTIST=x", "ALBUM=y")
        comments.set("ALBUM", "z")
        assert list(comments) == ["ALBUMARTIST=x", "ALBUM=z"]


class TestGet:
    """Tests for the exact-key read path."""

    def test_first_occurrence(self):
        comments = _multimap("TITLE=first", "TITLE=second")
        assert comments.get("TITLE") == "first"

    def test_case_sensitive(self):
        comments = _multimap("title=lower")
        assert comments.get("TITLE") == ""
        assert comments.get("title") == "lower"

    def test_absent_key(self):
        assert CommentMultimap().get("TITLE") == ""

    def test_value_may_contain_equals(self):
        comments = _multimap("DESCRIPTION=a=b")
        assert comments.get("DESCRIPTION") == "a=b"

    def test_get_all_skips_empty_values(self):
        comments = _multimap("LYRICS=", "lyrics=one", "OTHER=x", "LYRICS=two")
        assert comments.get_all("LYRICS") == ["one", "two"]


class TestEncoding:
    """Tests for decoding and encoding the vorbis comment byte layout."""

    def test_round_trip_keeps_vendor_and_order(self):
        payload = vorbis_payload(["B=2", "A=1", "C=ü"], vendor="my encoder")
        comments = CommentMultimap.from_block(VorbisCommentBlock(payload))
        assert comments.vendor == "my encoder"
        assert comments.to_block().data == payload

    def test_encoded_layout(self):
        comments = CommentMultimap()
        comments.set("TITLE", "Hé")
        data = comments.to_block().data
        vendor_length = struct.unpack('<I', data[:4])[0]
        offset = 4 + vendor_length
        assert struct.unpack('<I', data[offset:offset + 4])[0] == 1
        entry_length = struct.unpack('<I', data[offset + 4:offset + 8])[0]
        assert data[offset + 8:offset + 8 + entry_length] == "TITLE=Hé".encode('utf-8')

    def test_truncated_block(self):
        truncated = vorbis_payload(["TITLE=x"])[:12]
        with pytest.raises(DecodeError):
            CommentMultimap.from_block(VorbisCommentBlock(truncated))

    def test_entry_without_separator(self):
        with pytest.raises(DecodeError):
            CommentMultimap.from_block(VorbisCommentBlock(vorbis_payload(["NOEQUALS"])))
