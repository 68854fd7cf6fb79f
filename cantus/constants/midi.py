"""Standard MIDI File constants.

The encoder writes a single-track (format 0) file at a fixed resolution of
480 ticks per quarter note.
"""

TICKS_PER_QUARTER = 480

HEADER_MAGIC = b"MThd"
TRACK_MAGIC = b"MTrk"
HEADER_LENGTH = 6
FORMAT_SINGLE_TRACK = 0

# Largest value a variable-length quantity may carry (four bytes).
MAX_VLQ_VALUE = 0x0FFFFFFF

MIN_NOTE = 0
MAX_NOTE = 127
MIDDLE_C = 60
