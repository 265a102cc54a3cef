"""Exceptions raised by FLAC Tagger.

I/O failures are not wrapped: they surface as the builtin ``OSError``.
"""


class FlacTaggerError(Exception):
    """Base class for every error raised by this package."""


class FormatError(FlacTaggerError):
    """The file is not a structurally valid FLAC container."""


class DecodeError(FlacTaggerError):
    """A vorbis comment block is present but cannot be decoded."""


class NotFoundError(FlacTaggerError):
    """The requested piece of metadata is not embedded in the file."""
