import argparse

from mml_square.constants import Constant


def get_cli(argv=None):
    parser = argparse.ArgumentParser(
        description="mml_square: render MML text to a band-limited square wave",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "song",
        nargs="?",
        help="MML song text, e.g. \"t3 o0 c3 g3 o1 c3 g3\". The demo song is used if omitted.",
    )
    parser.add_argument(
        "--song-file", "-f", help="Read the song text from a .mml or .txt file"
    )
    parser.add_argument("--outfile", "-o", help="Output .wav file")
    parser.add_argument(
        "--comment",
        "-c",
        default="",
        help="Add a comment to the output WAV file metadata",
    )
    parser.add_argument(
        "--play",
        action="store_true",
        help="Play the rendered song (Windows only)",
    )

    render_group = parser.add_argument_group("Render Options")
    render_group.add_argument(
        "--samplerate",
        "-r",
        type=int,
        default=Constant.DEFAULT_SAMPLERATE,
        help="Output sample rate in Hz",
    )
    render_group.add_argument(
        "--tick-length",
        type=int,
        default=Constant.TICK_LENGTH,
        help="Samples per sequencer tick (smaller is faster)",
    )

    batch_group = parser.add_argument_group("Batch Render Options")
    batch_group.add_argument(
        "--batch-input",
        type=str,
        help="Directory searched recursively for .mml/.txt song files.",
    )
    batch_group.add_argument(
        "--batch-output",
        type=str,
        help="Output directory for the rendered .wav files.",
    )
    batch_group.add_argument(
        "--skip-errors",
        action="store_true",
        help="In batch mode, skip malformed songs instead of stopping.",
    )

    parser.add_argument(
        "--debug", action="store_true", help="Enable debug output and full tracebacks"
    )

    args = parser.parse_args(argv)

    modes_active = sum([
        1 if args.song else 0,
        1 if args.song_file else 0,
        1 if args.batch_input else 0,
    ])

    if modes_active > 1:
        parser.error("Only one song source can be used at a time: "
                     "song text, --song-file, or batch rendering (--batch-input).")
    if args.batch_input and not args.batch_output:
        parser.error("--batch-input requires --batch-output.")
    if args.samplerate <= 0:
        parser.error("--samplerate must be positive.")
    if args.tick_length <= 0:
        parser.error("--tick-length must be positive.")

    return args
