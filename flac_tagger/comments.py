import struct
from typing import Iterator, List, Optional

from mutagen import MutagenError
from mutagen.flac import VCFLACDict

from flac_tagger.blocks import VorbisCommentBlock
from flac_tagger.errors import DecodeError


class CommentMultimap:
    """
    Ordered KEY=value entries of one vorbis comment block.

    Writes match keys case-insensitively and keep a single entry per key;
    reads match the exact (canonical uppercase) key.
    """

    def __init__(self, comment: Optional[VCFLACDict] = None):
        self._comment = comment if comment is not None else VCFLACDict()

    @classmethod
    def from_block(cls, block: VorbisCommentBlock) -> "CommentMultimap":
        try:
            comment = VCFLACDict(block.data, errors='strict')
        except (MutagenError, ValueError, struct.error) as e:
            raise DecodeError(f"Failed to parse vorbis comment: {e}") from e
        return cls(comment)

    def to_block(self) -> VorbisCommentBlock:
        try:
            return VorbisCommentBlock(self._comment.write())
        except (MutagenError, ValueError) as e:
            raise DecodeError(f"Failed to encode vorbis comment: {e}") from e

    @property
    def vendor(self) -> str:
        return self._comment.vendor

    def set(self, key: str, value: str) -> None:
        if not value:
            return
        wanted = key.upper()
        matches = [i for i, (entry_key, _) in enumerate(self._comment)
                   if entry_key.upper() == wanted]
        # VCommentDict treats plain int indexes as tag names, slices go to the list
        for i in reversed(matches):
            del self._comment[i:i + 1]
        self._comment.append((key, value))

    def get(self, key: str) -> str:
        for entry_key, value in self._comment:
            if entry_key == key and value:
                return value
        return ""

    def get_all(self, key: str) -> List[str]:
        wanted = key.upper()
        return [value for entry_key, value in self._comment
                if entry_key.upper() == wanted and value]

    def __len__(self) -> int:
        return len(self._comment)

    def __iter__(self) -> Iterator[str]:
        for key, value in self._comment:
            yield f"{key}={value}"
