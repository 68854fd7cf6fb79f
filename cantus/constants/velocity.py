"""Velocity constants.

Note events carry a normalised velocity (0.0-1.0). The encoder maps it onto
the MIDI attack strength (1-127).
"""

# Normalised defaults
BASE_VELOCITY = 0.7             # Most sung notes
DOWNBEAT_ACCENT = 0.15          # Added on the first beat of a bar
BEAT_ACCENT = 0.05              # Added on the other beats
ORNAMENT_VELOCITY = 0.5         # Grace notes sit under the host note
CHORD_VELOCITY = 0.55           # Accompaniment triads

# Maximum random deviation at complexity 1.0
VELOCITY_JITTER = 0.05

# MIDI standard range (0 is reserved for note-off)
MIN_MIDI_VELOCITY = 1
MAX_MIDI_VELOCITY = 127
