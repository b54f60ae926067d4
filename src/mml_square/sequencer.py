import numpy as np

from mml_square.constants import Constant
from mml_square.notation import (
    EndOfSong,
    Note,
    OctaveDown,
    OctaveUp,
    Rest,
    SetOctave,
    SetTempo,
    decode_command,
    normalize_song,
)

DONE = -1


def build_note_table(sample_rate: int) -> np.ndarray:
    """
    Phase increment per sample for every playable note, equal tempered around A440.
    Increments that would not fit in 32 bits saturate at Constant.PHASE_MAX.
    """
    if sample_rate <= 0:
        raise ValueError(f"Sample rate must be positive, got {sample_rate}.")

    num_notes = Constant.NUM_OCTAVES * Constant.NOTES_PER_OCTAVE
    diff = np.arange(num_notes, dtype=np.float64) - Constant.NOTE_A_440
    freq = 440.0 * np.power(2.0, diff / 12)
    rate = np.floor(Constant.PHASE_MAX * (freq / sample_rate))
    return np.minimum(rate, Constant.PHASE_MAX).astype(np.uint32)


class MMLPlayer:
    """
    Reads MML text and produces a phase rate per song tick. It makes no audio
    itself; a rate of 0 means silence.
    """

    def __init__(self, sample_rate: int, song: str | None = None):
        self.note_to_phase_rate = build_note_table(sample_rate)
        self.load("" if song is None else song)

    def load(self, text: str) -> None:
        self.song = normalize_song(text)
        self.position = 0
        self.octave = Constant.DEFAULT_OCTAVE
        self.tempo = Constant.DEFAULT_TEMPO
        self.counts = 0
        self.output = 0

    def is_done(self) -> bool:
        return self.position < 0

    def ticks_for(self, length: int) -> int:
        return (self.tempo + 1) * Constant.LENGTH_TO_TICKS[length]

    def tick(self) -> int:
        """
        Advance one tick and return its phase rate.
        While a note or rest is still sounding this returns the previous rate;
        otherwise commands are decoded until the next note, rest or the end.
        Raises NotationError on malformed text.
        """
        self.counts -= 1
        if self.counts > 0:
            return self.output
        if self.is_done():
            return 0

        while True:
            command, self.position = decode_command(self.song, self.position)

            if isinstance(command, EndOfSong):
                self.position = DONE
                self.output = 0
                return self.output
            if isinstance(command, OctaveUp):
                if self.octave < Constant.NUM_OCTAVES - 1:
                    self.octave += 1
            elif isinstance(command, OctaveDown):
                if self.octave > 0:
                    self.octave -= 1
            elif isinstance(command, SetOctave):
                self.octave = command.octave
            elif isinstance(command, SetTempo):
                self.tempo = command.tempo
            elif isinstance(command, Rest):
                self.counts = self.ticks_for(command.length)
                self.output = 0
                return self.output
            elif isinstance(command, Note):
                self.counts = self.ticks_for(command.length)
                index = command.pitch + self.octave * Constant.NOTES_PER_OCTAVE
                # An accidental can push past either end; nudge back instead of failing
                if index >= len(self.note_to_phase_rate):
                    index -= 1
                elif index < 0:
                    index += 1
                self.output = int(self.note_to_phase_rate[index])
                return self.output
