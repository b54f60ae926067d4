from collections import namedtuple
from functools import cached_property
from pathlib import Path

import soundfile as sf

from mml_square.constants import Constant
from mml_square.notation import iter_commands, Note, Rest
from mml_square.utils import get_md5


class InputFile:
    def __init__(self, infile):
        self.infile = Path(infile).resolve()

    @property
    def name(self) -> str:
        return self.infile.name

    @property
    def extension(self) -> str:
        return self.infile.suffix.lower()

    @property
    def size_in_bytes(self) -> int:
        return self.infile.stat().st_size

    def recognize_type(self):
        if not self.infile.exists():
            raise FileNotFoundError(self.infile)
        if self.extension in SongFile.extensions:
            return SongFile(self.infile)
        if self.extension in WavFile.extensions:
            return WavFile(self.infile)
        raise ValueError(f"Unsupported file type: {self.infile}")


class SongFile:
    extensions = Constant.SONG_EXTENSIONS

    def __init__(self, infile):
        self.infile = Path(infile)

    @cached_property
    def text(self) -> str:
        with open(self.infile, "r", encoding="utf-8") as f:
            return f.read()

    def parse(self) -> namedtuple:
        return describe_song(self.text, str(self.infile))


class WavFile:
    extensions = (".wav",)

    def __init__(self, infile):
        self.infile = Path(infile)

    def parse(self) -> namedtuple:
        audio_data, samplerate = sf.read(self.infile, dtype="int16")
        info = sf.info(str(self.infile))

        wav_info = namedtuple(
            "info",
            ["samplerate", "channels", "num_samples", "duration", "subtype", "md5"],
        )
        return wav_info(
            samplerate,
            info.channels,
            len(audio_data),
            round(info.duration, 3),
            info.subtype,
            get_md5(audio_data),
        )


def describe_song(text: str, source: str = "<command line>") -> namedtuple:
    """
    Summarize a song without rendering it.
    Raises NotationError on malformed text, like rendering would.
    """
    notes = rests = 0
    for _, command in iter_commands(text):
        if isinstance(command, Note):
            notes += 1
        elif isinstance(command, Rest):
            rests += 1

    song_info = namedtuple("info", ["source", "characters", "notes", "rests"])
    return song_info(source, len(text), notes, rests)
