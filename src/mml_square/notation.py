from dataclasses import dataclass
from enum import Enum

from mml_square.constants import Constant

END_OF_SONG = "\0"
WHITESPACE = (" ", "\t", "\r", "\n")
NOTE_LETTERS = "ABCDEFG"
DIGITS = "0123456789"


@dataclass(frozen=True)
class OctaveUp:
    pass


@dataclass(frozen=True)
class OctaveDown:
    pass


@dataclass(frozen=True)
class SetOctave:
    octave: int


@dataclass(frozen=True)
class SetTempo:
    tempo: int


@dataclass(frozen=True)
class Rest:
    length: int  # index into the length table, not ticks


@dataclass(frozen=True)
class Note:
    pitch: int  # semitone within the octave, accidental applied
    length: int


@dataclass(frozen=True)
class EndOfSong:
    pass


class ErrorKind(Enum):
    INVALID_CHARACTER = "Invalid character in song string"
    INVALID_OCTAVE = "Invalid O command in song string"
    INVALID_TEMPO = "Invalid T command in song string"
    INVALID_REST_LENGTH = "Invalid R command in song string"
    INVALID_NOTE_LENGTH = "Invalid count number in note command in song string"


class NotationError(ValueError):
    """Malformed song text. Carries the failing command and where it starts."""

    def __init__(self, kind: ErrorKind, command: str, position: int):
        self.kind = kind
        self.command = command
        self.position = position
        super().__init__(f"{kind.value}: {command!r} at offset {position}")


def normalize_song(text: str) -> str:
    """Uppercase the song text and terminate it with the end sentinel."""
    return text.upper() + END_OF_SONG


def read_number(
    song: str, position: int, low: int, high: int, kind: ErrorKind, start: int
) -> tuple[int, int]:
    """
    Read one decimal digit at `position` and check it against [low, high].
    Args:
        song: Normalized song buffer.
        position: Offset of the digit.
        low, high: Inclusive range the digit must fall in.
        kind: Error kind raised on failure.
        start: Offset of the command that owns the digit, for error reporting.
    Returns:
        A tuple: (value, next_position)
    """
    char = song[position]
    if char not in DIGITS or not low <= int(char) <= high:
        raise NotationError(kind, song[start], start)
    return int(char), position + 1


def decode_command(song: str, position: int):
    """
    Decode the command at `position` of a normalized song.
    Whitespace is consumed without producing a command, so the returned
    command is never whitespace. Returns (command, next_position).
    """
    while song[position] in WHITESPACE:
        position += 1

    start = position
    char = song[position]
    position += 1

    if char == END_OF_SONG:
        return EndOfSong(), position
    if char == ">":
        return OctaveUp(), position
    if char == "<":
        return OctaveDown(), position
    if char == "O":
        octave, position = read_number(
            song, position, 0, Constant.NUM_OCTAVES - 1, ErrorKind.INVALID_OCTAVE, start
        )
        return SetOctave(octave), position
    if char == "T":
        tempo, position = read_number(song, position, 0, 9, ErrorKind.INVALID_TEMPO, start)
        return SetTempo(tempo), position
    if char == "R":
        length, position = read_number(
            song, position, 0, 9, ErrorKind.INVALID_REST_LENGTH, start
        )
        return Rest(length), position
    if char in NOTE_LETTERS:
        pitch = Constant.LETTER_TO_NOTE_NUMBER[ord(char) - ord("A")]

        # Optional sharp or flat after the note name
        accidental = song[position]
        if accidental in ("#", "+"):
            pitch += 1
            position += 1
        elif accidental == "-":
            pitch -= 1
            position += 1

        length, position = read_number(
            song, position, 0, 9, ErrorKind.INVALID_NOTE_LENGTH, start
        )
        return Note(pitch, length), position

    raise NotationError(ErrorKind.INVALID_CHARACTER, char, start)


def iter_commands(text: str):
    """Yield (offset, command) for every command of a song, ending with EndOfSong."""
    song = normalize_song(text)
    position = 0
    while True:
        while song[position] in WHITESPACE:
            position += 1
        offset = position
        command, position = decode_command(song, position)
        yield offset, command
        if isinstance(command, EndOfSong):
            return
