import io
import struct
import sys
from hashlib import md5
from pathlib import Path

import numpy as np
import soundfile as sf


def to_int16(audio_data: np.ndarray) -> np.ndarray:
    """Convert audio data to int16, scaling float data from -1 to 1 and clipping integers."""
    if audio_data.dtype == np.int16:
        return audio_data
    if audio_data.dtype.kind == "f":
        return (np.clip(audio_data, -1.0, 1.0) * 32767).astype(np.int16)
    if audio_data.dtype.kind in ("i", "u"):
        return np.clip(audio_data.astype(np.int64), -32768, 32767).astype(np.int16)
    raise TypeError(f"Unsupported audio data type for conversion to int16: {audio_data.dtype}")


def get_md5(audio_data: np.ndarray) -> str:
    """Calculate MD5 hash of audio data."""
    return md5(audio_data.tobytes()).hexdigest()


def comment_chunk(comment: str) -> bytes:
    """LIST/INFO chunk holding a single ICMT (comment) entry."""
    # Null terminated, padded to even length
    encoded_comment = comment.encode("utf-8") + b"\x00"
    if len(encoded_comment) % 2 != 0:
        encoded_comment += b"\x00"

    info_data = b"ICMT" + struct.pack("<I", len(encoded_comment)) + encoded_comment
    list_chunk_size = len(b"INFO") + len(info_data)
    return b"LIST" + struct.pack("<I", list_chunk_size) + b"INFO" + info_data


def write_wav(
    filename_out: Path,
    audio_data: np.ndarray,
    samplerate: int,
    comment: str = "",
) -> None:
    """Write samples as a 16-bit PCM mono .wav file with an optional comment."""
    filename_out = Path(filename_out)
    sf.write(filename_out, to_int16(audio_data), samplerate, subtype="PCM_16")

    if comment:
        with open(filename_out, "r+b") as f:
            f.seek(0, 2)
            f.write(comment_chunk(comment))

        # RIFF chunk size sits at offset 4: file size minus "RIFF" and the size field
        file_size = filename_out.stat().st_size
        with open(filename_out, "r+b") as f:
            f.seek(4)
            f.write(struct.pack("<I", file_size - 8))


def wav_bytes(audio_data: np.ndarray, samplerate: int) -> bytes:
    """The same 16-bit PCM mono container as write_wav, in memory."""
    buffer = io.BytesIO()
    sf.write(buffer, to_int16(audio_data), samplerate, format="WAV", subtype="PCM_16")
    return buffer.getvalue()


def play(audio_data: np.ndarray, samplerate: int) -> None:
    """Play samples synchronously through the Windows sound API."""
    if sys.platform != "win32":
        raise RuntimeError("Playback is only available on Windows. Use --outfile to save a .wav instead.")

    import winsound

    winsound.PlaySound(wav_bytes(audio_data, samplerate), winsound.SND_MEMORY)
