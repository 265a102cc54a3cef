import logging
import os
import shutil
import struct
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Type, Union

from mutagen import MutagenError
from mutagen.flac import Picture

from flac_tagger.constants import (
    BLOCK_HEADER_SIZE, BLOCK_TYPE_MASK, FLAC_MARKER, LAST_BLOCK_FLAG,
    MAX_BLOCK_LENGTH, BlockType
)
from flac_tagger.errors import FormatError
from flac_tagger.streaminfo import AudioQuality, decode_streaminfo


@dataclass
class StreamInfoBlock:
    data: bytes
    block_type: int = field(default=BlockType.STREAMINFO, init=False)

    @property
    def quality(self) -> AudioQuality:
        return decode_streaminfo(self.data)


@dataclass
class VorbisCommentBlock:
    data: bytes
    block_type: int = field(default=BlockType.VORBIS_COMMENT, init=False)


@dataclass
class PictureBlock:
    data: bytes
    block_type: int = field(default=BlockType.PICTURE, init=False)

    @classmethod
    def from_picture(cls, picture: Picture) -> "PictureBlock":
        return cls(picture.write())

    def picture(self) -> Picture:
        try:
            return Picture(self.data)
        except (MutagenError, struct.error, ValueError) as e:
            raise FormatError(f"Malformed PICTURE block: {e}") from e


@dataclass
class RawBlock:
    """Any block kind this package does not interpret (padding, seektable...)."""
    block_type: int
    data: bytes


MetadataBlock = Union[StreamInfoBlock, VorbisCommentBlock, PictureBlock, RawBlock]

_BLOCK_CLASSES: Dict[int, Type] = {
    BlockType.STREAMINFO: StreamInfoBlock,
    BlockType.VORBIS_COMMENT: VorbisCommentBlock,
    BlockType.PICTURE: PictureBlock,
}


def make_block(block_type: int, data: bytes) -> MetadataBlock:
    block_class = _BLOCK_CLASSES.get(block_type)
    if block_class is None:
        return RawBlock(block_type, data)
    return block_class(data)


class BlockStore:
    """
    The ordered metadata blocks of a FLAC file followed by its audio frames.
    The audio frames are kept as an opaque blob and written back untouched.
    """

    def __init__(self, blocks: Optional[List[MetadataBlock]] = None, audio: bytes = b""):
        self.blocks: List[MetadataBlock] = blocks if blocks is not None else []
        self.audio = audio

    @classmethod
    def parse(cls, file_path: Union[str, Path]) -> "BlockStore":
        with open(file_path, 'rb') as f:
            data = f.read()
        return cls.from_bytes(data)

    @classmethod
    def from_bytes(cls, data: bytes) -> "BlockStore":
        if data[:len(FLAC_MARKER)] != FLAC_MARKER:
            raise FormatError("Signature 'fLaC' not found at the beginning of the file.")

        blocks: List[MetadataBlock] = []
        offset = len(FLAC_MARKER)
        while True:
            header = data[offset:offset + BLOCK_HEADER_SIZE]
            if len(header) < BLOCK_HEADER_SIZE:
                raise FormatError("Unexpected end of file while reading a block header.")
            is_last = (header[0] & LAST_BLOCK_FLAG) != 0
            block_type = header[0] & BLOCK_TYPE_MASK
            length = struct.unpack('>I', b'\x00' + header[1:4])[0]
            offset += BLOCK_HEADER_SIZE

            if offset + length > len(data):
                raise FormatError(
                    f"Block {len(blocks)} (type {block_type}) declares {length} bytes "
                    f"but only {len(data) - offset} remain."
                )
            blocks.append(make_block(block_type, data[offset:offset + length]))
            offset += length
            if is_last:
                break

        return cls(blocks, data[offset:])

    def find_first(self, block_type: int) -> Tuple[int, Optional[MetadataBlock]]:
        for index, block in enumerate(self.blocks):
            if block.block_type == block_type:
                return index, block
        return -1, None

    def blocks_of(self, block_type: int) -> List[MetadataBlock]:
        return [b for b in self.blocks if b.block_type == block_type]

    def replace_or_append(self, new_block: MetadataBlock) -> None:
        """Replaces the first block of the same type in place, or appends."""
        index, _ = self.find_first(new_block.block_type)
        if index >= 0:
            self.blocks[index] = new_block
        else:
            self.blocks.append(new_block)

    def remove_all(self, block_type: int) -> int:
        removed = 0
        for i in range(len(self.blocks) - 1, -1, -1):
            if self.blocks[i].block_type == block_type:
                del self.blocks[i]
                removed += 1
        return removed

    def to_bytes(self) -> bytes:
        if not self.blocks:
            raise FormatError("A FLAC container needs at least one metadata block.")

        parts = [FLAC_MARKER]
        last_index = len(self.blocks) - 1
        for i, block in enumerate(self.blocks):
            if len(block.data) > MAX_BLOCK_LENGTH:
                raise FormatError(
                    f"Block {i} (type {block.block_type}) is too long to write "
                    f"({len(block.data)} bytes)."
                )
            flag = LAST_BLOCK_FLAG if i == last_index else 0
            parts.append(bytes([flag | block.block_type]))
            parts.append(struct.pack('>I', len(block.data))[-3:])
            parts.append(block.data)
        parts.append(self.audio)
        return b"".join(parts)

    def save(self, file_path: Union[str, Path]) -> None:
        """
        Writes the container to file_path through a temporary file in the same
        directory, so an interrupted write never leaves a truncated file behind.
        """
        file_path = Path(file_path)
        data = self.to_bytes()
        temp_path = file_path.parent / f"flac_tagger_{uuid.uuid4().hex[:8]}.tmp"
        try:
            with open(temp_path, 'wb') as f:
                f.write(data)
            if file_path.exists():
                shutil.copymode(file_path, temp_path)
            os.replace(temp_path, file_path)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise
        logging.debug(f"Saved {len(self.blocks)} metadata blocks to {file_path.name}")
