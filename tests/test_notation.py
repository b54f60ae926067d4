import pytest

from mml_square.notation import (
    EndOfSong,
    ErrorKind,
    Note,
    NotationError,
    OctaveDown,
    OctaveUp,
    Rest,
    SetOctave,
    SetTempo,
    decode_command,
    iter_commands,
    normalize_song,
    read_number,
)


def test_normalize_song():
    assert normalize_song("t3 o0 c3") == "T3 O0 C3\0"
    assert normalize_song("") == "\0"


def test_decode_single_commands():
    song = normalize_song("><o2t7r3")
    command, position = decode_command(song, 0)
    assert command == OctaveUp() and position == 1
    command, position = decode_command(song, position)
    assert command == OctaveDown() and position == 2
    command, position = decode_command(song, position)
    assert command == SetOctave(2) and position == 4
    command, position = decode_command(song, position)
    assert command == SetTempo(7) and position == 6
    command, position = decode_command(song, position)
    assert command == Rest(3) and position == 8
    command, position = decode_command(song, position)
    assert isinstance(command, EndOfSong)


def test_decode_skips_whitespace():
    song = normalize_song(" \t\r\n c4")
    command, position = decode_command(song, 0)
    assert command == Note(0, 4)
    assert position == len(song) - 1


def test_decode_notes_and_accidentals():
    assert decode_command(normalize_song("a0"), 0)[0] == Note(9, 0)
    assert decode_command(normalize_song("b9"), 0)[0] == Note(11, 9)
    assert decode_command(normalize_song("f#2"), 0)[0] == Note(6, 2)
    assert decode_command(normalize_song("f+2"), 0)[0] == Note(6, 2)
    assert decode_command(normalize_song("e-2"), 0)[0] == Note(3, 2)
    assert decode_command(normalize_song("c-1"), 0)[0] == Note(-1, 1)
    assert decode_command(normalize_song("b#1"), 0)[0] == Note(12, 1)


def test_decode_resumes_mid_song():
    song = normalize_song("c1 d2 e3")
    command, position = decode_command(song, 3)
    assert command == Note(2, 2)
    assert position == 5


@pytest.mark.parametrize(
    "text, kind, command, position",
    [
        ("O3", ErrorKind.INVALID_OCTAVE, "O", 0),
        ("c1 OX", ErrorKind.INVALID_OCTAVE, "O", 3),
        ("T", ErrorKind.INVALID_TEMPO, "T", 0),
        ("RX", ErrorKind.INVALID_REST_LENGTH, "R", 0),
        ("C", ErrorKind.INVALID_NOTE_LENGTH, "C", 0),
        ("  G#", ErrorKind.INVALID_NOTE_LENGTH, "G", 2),
        ("X", ErrorKind.INVALID_CHARACTER, "X", 0),
        ("#1", ErrorKind.INVALID_CHARACTER, "#", 0),
    ],
)
def test_decode_errors(text, kind, command, position):
    song = normalize_song(text)
    with pytest.raises(NotationError) as excinfo:
        offset = 0
        while True:
            decoded, offset = decode_command(song, offset)
            if isinstance(decoded, EndOfSong):
                break
    assert excinfo.value.kind is kind
    assert excinfo.value.command == command
    assert excinfo.value.position == position
    assert isinstance(excinfo.value, ValueError)


def test_iter_commands():
    commands = list(iter_commands("t0 o1 c1 r2 >d#3"))
    assert commands == [
        (0, SetTempo(0)),
        (3, SetOctave(1)),
        (6, Note(0, 1)),
        (9, Rest(2)),
        (12, OctaveUp()),
        (13, Note(3, 3)),
        (16, EndOfSong()),
    ]


def test_read_number_reports_owning_command():
    song = normalize_song("t5 o7")
    assert read_number(song, 1, 0, 9, ErrorKind.INVALID_TEMPO, 0) == (5, 2)
    with pytest.raises(NotationError) as excinfo:
        read_number(song, 4, 0, 2, ErrorKind.INVALID_OCTAVE, 3)
    assert excinfo.value.command == "O"
    assert excinfo.value.position == 3
