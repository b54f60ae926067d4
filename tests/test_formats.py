import struct
import sys

import numpy as np
import pytest
import soundfile as sf

from mml_square.formats import InputFile, SongFile, WavFile, describe_song
from mml_square.notation import NotationError
from mml_square.synth import generate_song_square_wave
from mml_square.utils import get_md5, play, to_int16, wav_bytes, write_wav


@pytest.fixture(scope="module")
def audio_data():
    return generate_song_square_wave("t0 o1 c2 r0 e2", tick_length=32)


def test_write_wav_round_trip(tmp_path, audio_data):
    outfile = tmp_path / "song.wav"
    write_wav(outfile, audio_data, 44100)

    info = InputFile(outfile).recognize_type().parse()
    assert info.samplerate == 44100
    assert info.channels == 1
    assert info.num_samples == len(audio_data)
    assert info.subtype == "PCM_16"
    assert info.md5 == get_md5(audio_data)


def test_write_wav_with_comment(tmp_path, audio_data):
    outfile = tmp_path / "commented.wav"
    write_wav(outfile, audio_data, 22050, comment="square")

    raw = outfile.read_bytes()
    assert raw[:4] == b"RIFF"
    assert struct.unpack("<I", raw[4:8])[0] == len(raw) - 8
    assert b"ICMT" in raw
    assert b"square\x00" in raw

    data, samplerate = sf.read(outfile, dtype="int16")
    assert samplerate == 22050
    np.testing.assert_array_equal(data, audio_data)


def test_wav_bytes(audio_data):
    raw = wav_bytes(audio_data, 44100)
    assert raw[:4] == b"RIFF"
    assert raw[8:12] == b"WAVE"
    assert len(raw) >= 44 + 2 * len(audio_data)


def test_to_int16():
    samples = np.array([-1.0, 0.0, 0.5, 2.0])
    np.testing.assert_array_equal(to_int16(samples), [-32767, 0, 16383, 32767])
    ints = np.array([1, -2], dtype=np.int16)
    assert to_int16(ints) is ints
    with pytest.raises(TypeError):
        to_int16(np.array(["a"]))


def test_play_needs_windows(monkeypatch, audio_data):
    monkeypatch.setattr(sys, "platform", "linux")
    with pytest.raises(RuntimeError):
        play(audio_data, 44100)


def test_recognize_type(tmp_path):
    song = tmp_path / "tune.MML"
    song.write_text("t0 c1 d1", encoding="utf-8")
    assert isinstance(InputFile(song).recognize_type(), SongFile)

    wav = tmp_path / "tune.wav"
    write_wav(wav, np.zeros(10, dtype=np.int16), 8000)
    assert isinstance(InputFile(wav).recognize_type(), WavFile)

    other = tmp_path / "tune.xyz"
    other.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        InputFile(other).recognize_type()

    with pytest.raises(FileNotFoundError):
        InputFile(tmp_path / "missing.mml").recognize_type()


def test_song_file_parse(tmp_path):
    song = tmp_path / "tune.txt"
    song.write_text("t0 c1 r1\nd1\n", encoding="utf-8")
    info = SongFile(song).parse()
    assert info.characters == 12
    assert info.notes == 2
    assert info.rests == 1


def test_describe_song_reports_errors():
    assert describe_song("").notes == 0
    with pytest.raises(NotationError):
        describe_song("c1 q")


def test_to_int16_clips_integers():
    samples = np.array([-40000, -32768, 0, 32767, 70000], dtype=np.int32)
    np.testing.assert_array_equal(to_int16(samples), [-32768, -32768, 0, 32767, 32767])
    np.testing.assert_array_equal(to_int16(np.array([65535], dtype=np.uint16)), [32767])
