from dataclasses import asdict
from typing import List, Dict, Any, Optional

from flac_tagger.streaminfo import AudioQuality
from flac_tagger.tagger import Metadata


def print_file_details(file_path: str, metadata: Metadata, quality: Optional[AudioQuality]):
    print(f"\n{'='*70}\nFile: {file_path}\n{'='*70}")

    if quality is not None:
        print("\n--- Audio Quality ---")
        print(f"  - Bit Depth: {quality.bit_depth}-bit")
        print(f"  - Sample Rate: {quality.sample_rate} Hz")

    tags = {k: v for k, v in asdict(metadata).items() if v and k != 'lyrics'}
    if tags:
        print("\n--- Tags ---")
        for key, value in tags.items():
            print(f"  - {key.replace('_', ' ').title()}: {value}")
    else:
        print("\n--- Tags ---\n  (none)")

    if metadata.lyrics:
        line_count = len(metadata.lyrics.splitlines())
        print(f"\n--- Lyrics ---\n  - {line_count} line(s) embedded")


def print_quality_result(result: Dict[str, Any]):
    if result['error']:
        print(f"✗ {result['file']}: {result['error']}")
        return
    quality = result['quality']
    print(f"✓ {result['file']}: {quality.bit_depth}-bit / {quality.sample_rate} Hz")


def print_quality_summary(results: List[Dict[str, Any]]):
    total = len(results)
    failed = sum(1 for r in results if r['error'])
    hi_res = sum(1 for r in results if r['quality'] and
                 (r['quality'].bit_depth > 16 or r['quality'].sample_rate > 48000))
    print(f"\n{'='*70}\nFINAL SUMMARY\n{'='*70}")
    print(f"Total files scanned: {total}")
    print(f"✓ CD quality or lower: {total - failed - hi_res}")
    print(f"✓ Hi-Res (> 16-bit or > 48 kHz): {hi_res}")
    print(f"✗ Unreadable files: {failed}")
    print(f"{'='*70}")
