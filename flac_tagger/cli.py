import logging
import typer
from pathlib import Path
from typing import List, Optional
from concurrent.futures import ProcessPoolExecutor

from flac_tagger.core import find_flac_files, quality_worker, setup_logging
from flac_tagger.errors import FlacTaggerError
from flac_tagger.reporter import print_file_details, print_quality_result, print_quality_summary
from flac_tagger.streaminfo import read_audio_quality
from flac_tagger.tagger import (
    Metadata, embed_lyrics, embed_metadata, extract_cover, extract_lyrics, read_metadata
)
from tqdm import tqdm

app = typer.Typer(help="FLAC Tagger - Read and write FLAC tags, lyrics, cover art and audio quality.")


def _fail(file_path: Path, error: Exception):
    logging.error(f"✗ {file_path.name}: {error}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose (debug) output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress all output except errors.")
):
    """
    Global configuration callback.
    """
    setup_logging(verbose, quiet)

@app.command()
def tag(
    file_path: Path = typer.Argument(..., help="FLAC file to tag."),
    title: str = typer.Option("", "--title"),
    artist: str = typer.Option("", "--artist"),
    album: str = typer.Option("", "--album"),
    album_artist: str = typer.Option("", "--album-artist"),
    date: str = typer.Option("", "--date"),
    track: int = typer.Option(0, "--track", help="Track number (skipped when 0)."),
    total_tracks: int = typer.Option(0, "--total-tracks"),
    disc: int = typer.Option(0, "--disc", help="Disc number (skipped when 0)."),
    isrc: str = typer.Option("", "--isrc"),
    description: str = typer.Option("", "--description"),
    lyrics_file: Optional[Path] = typer.Option(None, "--lyrics-file", help="Text file holding the lyrics."),
    cover: Optional[Path] = typer.Option(None, "--cover", help="JPEG image to embed as front cover."),
):
    """
    Write tags (and optionally lyrics and a front cover) into a FLAC file.
    """
    try:
        lyrics = lyrics_file.read_text(encoding='utf-8') if lyrics_file else ""
        metadata = Metadata(
            title=title, artist=artist, album=album, album_artist=album_artist, date=date,
            track_number=track, total_tracks=total_tracks, disc_number=disc,
            isrc=isrc, description=description, lyrics=lyrics,
        )
        embed_metadata(file_path, metadata, cover)
    except (FlacTaggerError, OSError) as e:
        _fail(file_path, e)
    logging.info(f"✓ Tagged: {file_path.name}")

@app.command()
def show(
    target_paths: List[Path] = typer.Argument(..., help="One or more FLAC files or directories."),
):
    """
    Print the tags and audio quality of each file.
    """
    files = list(find_flac_files(target_paths))
    if not files:
        logging.warning("No FLAC files found.")
        return

    for file_path in files:
        try:
            metadata = read_metadata(file_path)
            quality = read_audio_quality(file_path)
        except (FlacTaggerError, OSError) as e:
            logging.error(f"✗ {file_path.name}: {e}")
            continue
        print_file_details(str(file_path), metadata, quality)

@app.command()
def lyrics(
    file_path: Path = typer.Argument(..., help="FLAC file."),
    set_from: Optional[Path] = typer.Option(None, "--set", help="Embed lyrics read from this text file."),
):
    """
    Print the embedded lyrics, or embed new ones with --set.
    """
    try:
        if set_from is not None:
            embed_lyrics(file_path, set_from.read_text(encoding='utf-8'))
            logging.info(f"✓ Lyrics embedded: {file_path.name}")
        else:
            print(extract_lyrics(file_path))
    except (FlacTaggerError, OSError) as e:
        _fail(file_path, e)

@app.command()
def cover(
    file_path: Path = typer.Argument(..., help="FLAC file."),
    output: Path = typer.Argument(..., help="Where to write the embedded front cover."),
):
    """
    Extract the embedded cover art to a file.
    """
    try:
        output.write_bytes(extract_cover(file_path))
    except (FlacTaggerError, OSError) as e:
        _fail(file_path, e)
    logging.info(f"✓ Cover written to {output}")

@app.command()
def quality(
    target_paths: List[Path] = typer.Argument(..., help="One or more files or directories to process."),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Number of parallel workers."),
):
    """
    Report bit depth and sample rate of every FLAC file found.
    """
    logging.info("QUALITY Mode - Bit depth and sample rate\n" + "=" * 50)

    files = list(find_flac_files(target_paths))
    if not files:
        logging.warning("No FLAC files found.")
        return

    with ProcessPoolExecutor(max_workers=workers) as executor:
        results = list(tqdm(executor.map(quality_worker, files), total=len(files), unit="file"))

    for r in results:
        print_quality_result(r)
    print_quality_summary(results)


if __name__ == "__main__":
    app()
