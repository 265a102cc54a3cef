"""FLAC Tagger project constants."""

from enum import IntEnum


class BlockType(IntEnum):
    STREAMINFO = 0
    PADDING = 1
    APPLICATION = 2
    SEEKTABLE = 3
    VORBIS_COMMENT = 4
    CUESHEET = 5
    PICTURE = 6


# Container
FLAC_MARKER = b"fLaC"
BLOCK_HEADER_SIZE = 4
STREAMINFO_SIZE = 34
MAX_BLOCK_LENGTH = 2 ** 24 - 1
LAST_BLOCK_FLAG = 0x80
BLOCK_TYPE_MASK = 0x7F

# Vorbis comment keys
TITLE_KEY = "TITLE"
ARTIST_KEY = "ARTIST"
ALBUM_KEY = "ALBUM"
ALBUM_ARTIST_KEY = "ALBUMARTIST"
DATE_KEY = "DATE"
TRACK_NUMBER_KEY = "TRACKNUMBER"
DISC_NUMBER_KEY = "DISCNUMBER"
ISRC_KEY = "ISRC"
DESCRIPTION_KEY = "DESCRIPTION"
LYRICS_KEY = "LYRICS"
LEGACY_LYRICS_KEY = "UNSYNCEDLYRICS"

# Cover art
FRONT_COVER_PICTURE_TYPE = 3
COVER_MIME_TYPE = "image/jpeg"
COVER_DESCRIPTION = "Front Cover"
