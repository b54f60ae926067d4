import numpy as np

from mml_square.constants import Constant


class SquareWavetable:
    """Band-limited (mipmapped) wavetables of a square wave."""

    def __init__(self, sample_rate: int):
        if sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {sample_rate}.")
        self.sample_rate = sample_rate
        self.generate()

    def generate(self) -> None:
        """
        Build every table by additive synthesis.
        The bottom table holds all odd harmonics from the base frequency up to
        the cutoff. Each following table serves notes an octave higher, so it
        keeps half as many harmonics, down to a single sine.
        """
        num_tables = Constant.WAVETABLE_NUM_TABLES
        size = Constant.WAVETABLE_SIZE

        self.data = np.zeros((num_tables, size), dtype=np.float32)
        self.top_phase_rate = np.zeros(num_tables, dtype=np.uint32)

        position = np.arange(size, dtype=np.float64) / size
        frequency = Constant.WAVETABLE_BASE_FREQ
        max_harmonics = int(Constant.WAVETABLE_CUTOFF_FREQ / Constant.WAVETABLE_BASE_FREQ)

        for table_num in range(num_tables):
            # Square wave: odd harmonics only, level falls as 1/n
            harmonics = np.arange(1, max_harmonics + 1, 2, dtype=np.float64)
            partials = np.sin(2 * np.pi * np.outer(harmonics, position)) / harmonics[:, None]
            wave = partials.sum(axis=0)

            peak_value = np.abs(wave).max()
            self.data[table_num] = (wave / peak_value).astype(np.float32)

            rate = Constant.PHASE_MAX * 2 * frequency / self.sample_rate
            self.top_phase_rate[table_num] = min(int(rate), Constant.PHASE_MAX)

            frequency *= 2
            max_harmonics = max(max_harmonics // 2, 1)

    def get_table(self, phase_rate: int) -> int:
        """
        Index of the lowest table that will not alias at `phase_rate`.
        Rates above every threshold fall through to the last table.
        """
        return int(np.searchsorted(self.top_phase_rate[:-1], phase_rate, side="left"))

    def lookup(self, phase: int, table: int) -> float:
        """Linearly interpolated sample at a 32 bit fixed point phase."""
        phase &= Constant.PHASE_MAX
        left = phase >> Constant.WAVETABLE_SHIFT
        right = ((phase + Constant.WAVETABLE_MASK + 1) & Constant.PHASE_MAX) >> Constant.WAVETABLE_SHIFT
        fraction = (phase & Constant.WAVETABLE_MASK) / (Constant.WAVETABLE_MASK + 1)
        s1 = float(self.data[table][left])
        s2 = float(self.data[table][right])
        return s1 + (s2 - s1) * fraction

    def lookup_many(self, phases: np.ndarray, table: int) -> np.ndarray:
        """Vectorised `lookup` over an array of phases."""
        phases = np.asarray(phases, dtype=np.uint64) & Constant.PHASE_MAX
        left = phases >> Constant.WAVETABLE_SHIFT
        right = ((phases + Constant.WAVETABLE_MASK + 1) & Constant.PHASE_MAX) >> Constant.WAVETABLE_SHIFT
        fraction = (phases & Constant.WAVETABLE_MASK) / (Constant.WAVETABLE_MASK + 1)
        s1 = self.data[table][left].astype(np.float64)
        s2 = self.data[table][right].astype(np.float64)
        return s1 + (s2 - s1) * fraction
