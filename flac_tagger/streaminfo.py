from dataclasses import dataclass
from pathlib import Path
from typing import Union

from flac_tagger.constants import (
    BLOCK_HEADER_SIZE, BLOCK_TYPE_MASK, FLAC_MARKER, STREAMINFO_SIZE, BlockType
)
from flac_tagger.errors import FormatError


@dataclass(frozen=True)
class AudioQuality:
    bit_depth: int
    sample_rate: int


def decode_streaminfo(payload: bytes) -> AudioQuality:
    """Decodes sample rate and bit depth from a raw STREAMINFO payload."""
    if len(payload) < STREAMINFO_SIZE:
        raise FormatError(f"STREAMINFO block too short ({len(payload)} bytes).")

    # Bytes 10-13: 20 bits sample rate, 3 bits channels - 1, 5 bits bit depth - 1
    sample_rate = (payload[10] << 12) | (payload[11] << 4) | (payload[12] >> 4)
    bit_depth = (((payload[12] & 0x01) << 4) | (payload[13] >> 4)) + 1
    return AudioQuality(bit_depth=bit_depth, sample_rate=sample_rate)


def read_audio_quality(file_path: Union[str, Path]) -> AudioQuality:
    """
    Reads bit depth and sample rate straight from the STREAMINFO block.
    STREAMINFO is always the first metadata block after the 'fLaC' marker.
    """
    with open(file_path, 'rb') as f:
        if f.read(len(FLAC_MARKER)) != FLAC_MARKER:
            raise FormatError(f"Signature 'fLaC' not found at the beginning of {file_path}.")

        header = f.read(BLOCK_HEADER_SIZE)
        if len(header) < BLOCK_HEADER_SIZE:
            raise FormatError("Unexpected end of file while reading a block header.")
        block_type = header[0] & BLOCK_TYPE_MASK
        if block_type != BlockType.STREAMINFO:
            raise FormatError(f"First metadata block is type {block_type}, expected STREAMINFO.")

        payload = f.read(STREAMINFO_SIZE)
    return decode_streaminfo(payload)
