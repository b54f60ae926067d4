class Constant:
    DEFAULT_SAMPLERATE = 44100
    # Samples emitted per sequencer tick, independent of sample rate
    TICK_LENGTH = 2700
    AMPLITUDE = 16384

    NUM_OCTAVES = 3
    NOTES_PER_OCTAVE = 12
    # Index of A4 (440 Hz) in the note table
    NOTE_A_440 = 21
    DEFAULT_OCTAVE = 1
    DEFAULT_TEMPO = 4

    # 32 bit fixed point phase, 0 to 1 spans one wavetable period
    PHASE_MAX = 0xFFFFFFFF

    WAVETABLE_SIZE = 1024  # must be a power of 2
    # Right shift that turns a phase into a table index
    WAVETABLE_SHIFT = 22
    # Bits below the table index, the fractional part of the phase
    WAVETABLE_MASK = 0x3FFFFF
    WAVETABLE_NUM_TABLES = 8
    WAVETABLE_BASE_FREQ = 40.0
    WAVETABLE_CUTOFF_FREQ = 20000.0

    #                        A   B  C  D  E  F  G
    LETTER_TO_NOTE_NUMBER = (9, 11, 0, 2, 4, 5, 7)
    #                  0  1  2  3  4  5   6   7   8   9
    LENGTH_TO_TICKS = (1, 2, 3, 4, 6, 8, 12, 16, 24, 32)

    SONG_EXTENSIONS = (".mml", ".txt")

    DEMO_SONG = (
        "t0E5R1E3R0D3R0E3R0E1R0D1R0>G4R1<"
        + "F3R0F1R0F1R0A3R0F1R0E1R0D1R0D1R0E5R0" * 2
        + "C3R0C1R0C1R0E3R0C1R0>B1<R0C1R0>B1R0A1R0A1B5R0<" * 2
        + "F3R0F1R0F1R0A3R0F1R0E1R0D1R0D1R0E5R0"
        + "C3R0C1R0C1R0E3R0C1R0>B1<R0C1R0>B1R0A1R0A1B5R0<"
        + "E1R0E1R0E1R0E1R0E1R0E1R0D1R0E1R0E1R0E1R0D1R0>A1R0A1R0B3R1<"
        + ">A1R0B1R0<C1R0D1R0E1R0F1R0E1R0F3R1A3R1B1R0A1R0F3R0E3R0E1R0E4R0"
    )
