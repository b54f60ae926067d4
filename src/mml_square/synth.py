from collections import namedtuple

import numpy as np

from mml_square.constants import Constant
from mml_square.sequencer import MMLPlayer
from mml_square.wavetable import SquareWavetable

processing_log = []

TickInfo = namedtuple("TickInfo", ["phase_rate", "table", "start_phase"])


class SquareWaveSynth:
    """
    Renders an MML song to 16-bit mono PCM with a band-limited square wave.
    One phase accumulator runs across the whole song and is never reset
    between notes, so pitch changes do not click.
    """

    def __init__(
        self,
        sample_rate: int = Constant.DEFAULT_SAMPLERATE,
        tick_length: int = Constant.TICK_LENGTH,
    ):
        if tick_length <= 0:
            raise ValueError(f"Tick length must be positive, got {tick_length}.")
        self.sample_rate = sample_rate
        self.tick_length = tick_length
        self.wavetable = SquareWavetable(sample_rate)
        self.player = MMLPlayer(sample_rate)
        self.song_text = ""
        self.phase = 0

    def load_song(self, text: str) -> None:
        self.song_text = text
        self.player.load(text)
        self.phase = 0
        processing_log.append(f"Loaded song: {len(text)} characters.")

    def iter_ticks(self):
        """
        Drive the player until the song ends, yielding a TickInfo per tick.
        The phase accumulator is advanced past each sounding tick before the
        next one is requested. The tick that only reaches the end of the song
        is not yielded. Every call starts over from the top of the loaded
        song with the phase at 0, so repeated renders match.
        """
        self.player.load(self.song_text)
        self.phase = 0
        while not self.player.is_done():
            phase_rate = self.player.tick()
            if self.player.is_done():
                return
            table = self.wavetable.get_table(phase_rate)
            yield TickInfo(phase_rate, table, self.phase)
            if phase_rate:
                self.phase = (self.phase + phase_rate * self.tick_length) & Constant.PHASE_MAX

    def render_tick(self, tick: TickInfo) -> np.ndarray:
        if tick.phase_rate == 0:
            return np.zeros(self.tick_length, dtype=np.int16)
        steps = np.arange(self.tick_length, dtype=np.uint64) * np.uint64(tick.phase_rate)
        phases = (steps + np.uint64(tick.start_phase)) & Constant.PHASE_MAX
        samples = self.wavetable.lookup_many(phases, tick.table)
        # astype truncates toward zero
        return (Constant.AMPLITUDE * samples).astype(np.int16)

    def render_song(self) -> np.ndarray:
        """Render the loaded song to a flat int16 array. Raises NotationError on bad text."""
        chunks = []
        silent_ticks = 0
        for tick in self.iter_ticks():
            chunks.append(self.render_tick(tick))
            if tick.phase_rate == 0:
                silent_ticks += 1

        if not chunks:
            processing_log.append("Song is empty: rendered 0 samples.")
            return np.array([], dtype=np.int16)

        data = np.concatenate(chunks)
        processing_log.append(
            f"Rendered {len(chunks)} ticks ({silent_ticks} silent), "
            f"{len(data)} samples at {self.sample_rate} Hz."
        )
        return data


def generate_song_square_wave(
    text: str,
    sample_rate: int = Constant.DEFAULT_SAMPLERATE,
    tick_length: int = Constant.TICK_LENGTH,
) -> np.ndarray:
    synth = SquareWaveSynth(sample_rate, tick_length)
    synth.load_song(text)
    return synth.render_song()
