"""Sub-beat duration constants for the rhythm grid.

All values are in **sub-beats**, where 1 = one sixteenth note. The rhythm
generator quantizes every step to this grid, so durations are always
positive integers::

    import cantus.constants.durations as dur

    # "a dotted quarter"
    length = dur.DOTTED_QUARTER     # 6 sub-beats

    # "one bar of 3/4"
    length = 3 * dur.QUARTER        # 12 sub-beats
"""

SIXTEENTH = 1
EIGHTH = 2
DOTTED_EIGHTH = 3
QUARTER = 4
DOTTED_QUARTER = 6
HALF = 8
WHOLE = 16

# Sub-beats in one quarter note (the tempo beat).
SUB_BEATS_PER_QUARTER = QUARTER
