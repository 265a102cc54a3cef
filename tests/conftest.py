"""Fixtures that synthesize small FLAC containers and JPEG images."""

import struct
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest
from PIL import Image

AUDIO_TAIL = b"\xff\xf8\x69\x08" + bytes(range(64))


def streaminfo_payload(sample_rate: int = 44100, bit_depth: int = 16,
                       channels: int = 2, total_samples: int = 441000) -> bytes:
    packed = ((sample_rate << 44) | ((channels - 1) << 41) |
              ((bit_depth - 1) << 36) | total_samples)
    return (struct.pack('>HH', 4096, 4096) + b"\x00\x00\x10" + b"\x00\x20\x00" +
            struct.pack('>Q', packed) + b"\x00" * 16)


def vorbis_payload(entries: Sequence[str], vendor: str = "reference libFLAC 1.4.3") -> bytes:
    vendor_bytes = vendor.encode('utf-8')
    parts = [struct.pack('<I', len(vendor_bytes)), vendor_bytes, struct.pack('<I', len(entries))]
    for entry in entries:
        raw = entry.encode('utf-8')
        parts.append(struct.pack('<I', len(raw)))
        parts.append(raw)
    return b"".join(parts)


def picture_payload(image: bytes, mime: str = "image/jpeg", desc: str = "", picture_type: int = 3) -> bytes:
    mime_bytes = mime.encode('utf-8')
    desc_bytes = desc.encode('utf-8')
    return (struct.pack('>2I', picture_type, len(mime_bytes)) + mime_bytes +
            struct.pack('>I', len(desc_bytes)) + desc_bytes +
            struct.pack('>5I', 1, 1, 24, 0, len(image)) + image)


def build_flac(blocks: List[Tuple[int, bytes]], audio: bytes = AUDIO_TAIL) -> bytes:
    out = [b"fLaC"]
    for i, (block_type, payload) in enumerate(blocks):
        flag = 0x80 if i == len(blocks) - 1 else 0
        out.append(bytes([flag | block_type]) + struct.pack('>I', len(payload))[-3:] + payload)
    out.append(audio)
    return b"".join(out)


def make_jpeg(color: Tuple[int, int, int] = (200, 30, 30), size: Tuple[int, int] = (8, 4)) -> bytes:
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, "JPEG")
    return buf.getvalue()


@pytest.fixture
def make_flac(tmp_path):
    """Factory writing a FLAC file: STREAMINFO, optional comments/pictures, padding, audio."""

    def _make(comments: Optional[Sequence[str]] = None, pictures: Sequence[bytes] = (),
              padding: int = 0, name: str = "track.flac", sample_rate: int = 44100,
              bit_depth: int = 16) -> Path:
        blocks = [(0, streaminfo_payload(sample_rate=sample_rate, bit_depth=bit_depth))]
        if comments is not None:
            blocks.append((4, vorbis_payload(comments)))
        for image in pictures:
            blocks.append((6, picture_payload(image)))
        if padding:
            blocks.append((1, b"\x00" * padding))
        path = tmp_path / name
        path.write_bytes(build_flac(blocks))
        return path

    return _make


@pytest.fixture
def jpeg_file(tmp_path):
    path = tmp_path / "cover.jpg"
    path.write_bytes(make_jpeg())
    return path
