"""
Reading and writing FLAC tags, lyrics and cover art.

Every public function is a self-contained parse -> mutate -> save cycle on
the file it is given. Parse and save failures abort the call before anything
is written; cover art problems only produce a warning and the tags are still
saved.
"""

import logging
import re
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple, Union

from mutagen.flac import Picture
from PIL import Image, UnidentifiedImageError

from flac_tagger.blocks import BlockStore, PictureBlock
from flac_tagger.comments import CommentMultimap
from flac_tagger.constants import (
    ALBUM_ARTIST_KEY, ALBUM_KEY, ARTIST_KEY, COVER_DESCRIPTION, COVER_MIME_TYPE,
    DATE_KEY, DESCRIPTION_KEY, DISC_NUMBER_KEY, FRONT_COVER_PICTURE_TYPE, ISRC_KEY,
    LEGACY_LYRICS_KEY, LYRICS_KEY, TITLE_KEY, TRACK_NUMBER_KEY, BlockType
)
from flac_tagger.errors import DecodeError, NotFoundError
from flac_tagger.streaminfo import AudioQuality, read_audio_quality

PathLike = Union[str, Path]

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class Metadata:
    title: str = ""
    artist: str = ""
    album: str = ""
    album_artist: str = ""
    date: str = ""
    track_number: int = 0
    total_tracks: int = 0
    disc_number: int = 0
    isrc: str = ""
    description: str = ""
    lyrics: str = ""


def embed_metadata(file_path: PathLike, metadata: Metadata, cover_path: Optional[PathLike] = None) -> None:
    """Writes the tag set, and the cover read from cover_path when one is given."""
    store, comments = _load_for_update(file_path)
    _apply_metadata(comments, metadata)
    store.replace_or_append(comments.to_block())

    if cover_path:
        cover_data = _read_cover_file(Path(cover_path))
        if cover_data:
            _embed_cover(store, cover_data)

    store.save(file_path)


def embed_metadata_with_cover_data(file_path: PathLike, metadata: Metadata, cover_data: bytes = b"") -> None:
    """Same as embed_metadata, with the cover image supplied in memory."""
    store, comments = _load_for_update(file_path)
    _apply_metadata(comments, metadata)
    store.replace_or_append(comments.to_block())

    if cover_data:
        _embed_cover(store, cover_data)

    store.save(file_path)


def read_metadata(file_path: PathLike) -> Metadata:
    store = BlockStore.parse(file_path)
    metadata = Metadata()
    comments = _load_for_read(store, file_path)
    if comments is None:
        return metadata

    metadata.title = comments.get(TITLE_KEY)
    metadata.artist = comments.get(ARTIST_KEY)
    metadata.album = comments.get(ALBUM_KEY)
    metadata.album_artist = comments.get(ALBUM_ARTIST_KEY)
    metadata.date = comments.get(DATE_KEY)
    metadata.isrc = comments.get(ISRC_KEY)
    metadata.description = comments.get(DESCRIPTION_KEY)
    metadata.lyrics = comments.get(LYRICS_KEY) or comments.get(LEGACY_LYRICS_KEY)
    metadata.track_number, metadata.total_tracks = _parse_number_pair(comments.get(TRACK_NUMBER_KEY))
    metadata.disc_number, _ = _parse_number_pair(comments.get(DISC_NUMBER_KEY))
    return metadata


def embed_lyrics(file_path: PathLike, lyrics: str) -> None:
    store, comments = _load_for_update(file_path)
    comments.set(LYRICS_KEY, lyrics)
    comments.set(LEGACY_LYRICS_KEY, lyrics)
    store.replace_or_append(comments.to_block())
    store.save(file_path)


def extract_lyrics(file_path: PathLike) -> str:
    store = BlockStore.parse(file_path)
    comments = _load_for_read(store, file_path)
    if comments is not None:
        for key in (LYRICS_KEY, LEGACY_LYRICS_KEY):
            values = comments.get_all(key)
            if values:
                return values[0]
    raise NotFoundError(f"No lyrics found in {file_path}")


def extract_cover(file_path: PathLike) -> bytes:
    """Returns the image data of the first embedded picture."""
    store = BlockStore.parse(file_path)
    _, block = store.find_first(BlockType.PICTURE)
    if block is None:
        raise NotFoundError(f"No cover art found in {file_path}")
    return block.picture().data


def get_audio_quality(file_path: PathLike) -> AudioQuality:
    return read_audio_quality(file_path)


def _load_for_update(file_path: PathLike) -> Tuple[BlockStore, CommentMultimap]:
    store = BlockStore.parse(file_path)
    _, block = store.find_first(BlockType.VORBIS_COMMENT)
    if block is None:
        return store, CommentMultimap()
    return store, CommentMultimap.from_block(block)


def _load_for_read(store: BlockStore, file_path: PathLike) -> Optional[CommentMultimap]:
    _, block = store.find_first(BlockType.VORBIS_COMMENT)
    if block is None:
        return None
    try:
        return CommentMultimap.from_block(block)
    except DecodeError as e:
        logging.warning(f"⚠ Skipping unreadable vorbis comment in {Path(file_path).name}: {e}")
        return None


def _apply_metadata(comments: CommentMultimap, metadata: Metadata) -> None:
    comments.set(TITLE_KEY, metadata.title)
    comments.set(ARTIST_KEY, metadata.artist)
    comments.set(ALBUM_KEY, metadata.album)
    comments.set(ALBUM_ARTIST_KEY, metadata.album_artist)
    comments.set(DATE_KEY, metadata.date)

    if metadata.track_number > 0:
        if metadata.total_tracks > 0:
            comments.set(TRACK_NUMBER_KEY, f"{metadata.track_number}/{metadata.total_tracks}")
        else:
            comments.set(TRACK_NUMBER_KEY, str(metadata.track_number))

    if metadata.disc_number > 0:
        comments.set(DISC_NUMBER_KEY, str(metadata.disc_number))

    if metadata.isrc:
        comments.set(ISRC_KEY, metadata.isrc)

    if metadata.description:
        comments.set(DESCRIPTION_KEY, metadata.description)

    if metadata.lyrics:
        comments.set(LYRICS_KEY, metadata.lyrics)
        comments.set(LEGACY_LYRICS_KEY, metadata.lyrics)


def _parse_number_pair(value: str) -> Tuple[int, int]:
    """'3/12' -> (3, 12), '3' -> (3, 0), anything unparsable -> 0."""
    number_part, _, total_part = value.partition("/")
    return _leading_int(number_part), _leading_int(total_part)


def _leading_int(value: str) -> int:
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else 0


def _read_cover_file(cover_path: Path) -> Optional[bytes]:
    if not cover_path.exists():
        logging.warning(f"⚠ Cover file does not exist: {cover_path}")
        return None
    try:
        return cover_path.read_bytes()
    except OSError as e:
        logging.warning(f"⚠ Failed to read cover file {cover_path}: {e}")
        return None


def _build_front_cover(cover_data: bytes) -> PictureBlock:
    with Image.open(BytesIO(cover_data)) as img:
        if img.format != "JPEG":
            raise ValueError(f"expected JPEG data, got {img.format}")
        width, height = img.size
        depth = 8 * len(img.getbands())

    picture = Picture()
    picture.type = FRONT_COVER_PICTURE_TYPE
    picture.mime = COVER_MIME_TYPE
    picture.desc = COVER_DESCRIPTION
    picture.width = width
    picture.height = height
    picture.depth = depth
    picture.data = cover_data
    return PictureBlock.from_picture(picture)


def _embed_cover(store: BlockStore, cover_data: bytes) -> None:
    """Replaces every embedded picture with one front cover. Failures are only logged."""
    try:
        block = _build_front_cover(cover_data)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logging.warning(f"⚠ Failed to create picture block: {e}")
        return

    store.remove_all(BlockType.PICTURE)
    store.replace_or_append(block)
    logging.info(f"✓ Cover art embedded ({len(cover_data)} bytes)")
