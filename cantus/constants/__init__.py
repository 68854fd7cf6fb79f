"""Constants for cantus.

This package contains three sets of constants:

- ``cantus.constants.durations`` - Sub-beat durations used by the rhythm grid
- ``cantus.constants.velocity`` - Normalised and MIDI velocity constants
- ``cantus.constants.midi`` - Standard MIDI File layout values (PPQ, chunk magic, meta types)
"""
