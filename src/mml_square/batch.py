import os
from pathlib import Path

from mml_square.constants import Constant
from mml_square.formats import SongFile
from mml_square.notation import NotationError
from mml_square.synth import SquareWaveSynth, processing_log
from mml_square.utils import write_wav


def find_song_files(input_dir) -> list[Path]:
    found = []
    for root, _, files in os.walk(input_dir):
        for f in files:
            if Path(f).suffix.lower() in Constant.SONG_EXTENSIONS:
                found.append(Path(root) / f)
    return sorted(found)


def render_directory(
    input_dir,
    output_dir,
    samplerate: int = Constant.DEFAULT_SAMPLERATE,
    tick_length: int = Constant.TICK_LENGTH,
    skip_errors: bool = False,
) -> list[Path]:
    """
    Recursively render every song file in input_dir to a .wav in output_dir.
    The directory structure below input_dir is mirrored in output_dir.
    Args:
        input_dir: Directory searched for .mml and .txt song files.
        output_dir: Root directory for the rendered .wav files.
        samplerate: Output sample rate.
        tick_length: Samples per sequencer tick.
        skip_errors: Log malformed songs and carry on instead of raising.
    Returns:
        Paths of the written .wav files.
    """
    found = find_song_files(input_dir)
    if not found:
        print(f"No song files in {input_dir}")
        return []

    synth = SquareWaveSynth(samplerate, tick_length)
    written = []
    for path in found:
        rel = path.relative_to(input_dir)
        outp = Path(output_dir) / rel.with_suffix(".wav")

        synth.load_song(SongFile(path).text)
        try:
            audio_data = synth.render_song()
        except NotationError as e:
            if not skip_errors:
                raise
            processing_log.append(f"Skipped {rel}: {e}")
            continue

        outp.parent.mkdir(parents=True, exist_ok=True)
        write_wav(outp, audio_data, samplerate)
        processing_log.append(f"Rendered {rel} -> {outp.name}")
        written.append(outp)

    print(f"Batch render complete: {len(written)} of {len(found)} songs written.")
    return written
