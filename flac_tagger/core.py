import sys
import logging
from pathlib import Path
from typing import Iterator, List

from flac_tagger.errors import FlacTaggerError
from flac_tagger.streaminfo import AudioQuality, read_audio_quality


def setup_logging(verbose: bool = False, quiet: bool = False):
    """Configure logging for the application."""
    log_level = logging.INFO
    if verbose:
        log_level = logging.DEBUG
    if quiet:
        log_level = logging.ERROR

    # Simple format for INFO, detailed for DEBUG
    log_format = '%(message)s' if log_level > logging.DEBUG else '%(levelname)s: %(message)s'

    logging.basicConfig(level=log_level, format=log_format, stream=sys.stdout)

def find_flac_files(target_paths: List[Path]) -> Iterator[Path]:
    """Recursively search for FLAC files in given paths."""
    for path in target_paths:
        if not path.exists():
            logging.warning(f"Path '{path}' does not exist.")
            continue
        if path.is_file() and path.suffix.lower() == '.flac':
            yield path
        elif path.is_dir():
            yield from sorted(path.rglob('*.flac'))

def quality_worker(file_path: Path) -> dict:
    """
    Reads the audio quality of one file for a process pool.
    Returns a plain dict so failures travel back as data instead of exceptions.
    """
    result = {'file': str(file_path), 'quality': None, 'error': None}
    try:
        quality: AudioQuality = read_audio_quality(file_path)
        result['quality'] = quality
    except (FlacTaggerError, OSError) as e:
        result['error'] = str(e)
    return result
