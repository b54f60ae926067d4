import sys
from pathlib import Path
from pprint import pprint

from mml_square.batch import render_directory
from mml_square.cli import get_cli
from mml_square.constants import Constant
from mml_square.formats import InputFile, SongFile, describe_song
from mml_square.notation import NotationError
from mml_square.synth import SquareWaveSynth, processing_log
from mml_square.utils import play, write_wav


def print_log() -> None:
    if processing_log:
        print("\n--- Render Log ---")
        for entry in processing_log:
            print(f"- {entry}")


def render(cli) -> None:
    if cli.song_file:
        song = InputFile(cli.song_file).recognize_type()
        if not isinstance(song, SongFile):
            raise ValueError(f"Not a song file: {cli.song_file}")
        text = song.text
        source = str(song.infile)
    elif cli.song:
        text = cli.song
        source = "<command line>"
    else:
        print("No song given, playing the demo song.")
        text = Constant.DEMO_SONG
        source = "<demo>"

    print("Song details:")
    pprint(dict(describe_song(text, source)._asdict()), sort_dicts=False)

    synth = SquareWaveSynth(cli.samplerate, cli.tick_length)
    synth.load_song(text)
    audio_data = synth.render_song()

    if cli.outfile:
        if Path(cli.outfile).suffix.lower() != ".wav":
            raise NotImplementedError(f"Only .wav output is supported: {cli.outfile}")
        write_wav(Path(cli.outfile), audio_data, cli.samplerate, comment=cli.comment)

        print("\nOutput file details:")
        outfile = InputFile(cli.outfile).recognize_type().parse()
        pprint(dict(outfile._asdict()), sort_dicts=False)

    if cli.play or (not cli.outfile and sys.platform == "win32"):
        play(audio_data, cli.samplerate)
    elif not cli.outfile:
        print("\nNo output file specified (--outfile). No file saved.")


def main(argv=None) -> None:
    cli = get_cli(argv)
    processing_log.clear()

    sys.tracebacklimit = 0 if not cli.debug else 1000

    try:
        if cli.batch_input:
            if not Path(cli.batch_input).is_dir():
                raise FileNotFoundError(cli.batch_input)
            render_directory(
                cli.batch_input,
                cli.batch_output,
                samplerate=cli.samplerate,
                tick_length=cli.tick_length,
                skip_errors=cli.skip_errors,
            )
        else:
            render(cli)
    except NotationError as e:
        print_log()
        if cli.debug:
            raise
        print(f"Notation error: {e}")
        sys.exit(1)

    print_log()
