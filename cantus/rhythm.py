"""Rhythm generation on a sixteenth-note grid.

Every lyric token receives one :class:`RhythmStep` whose duration is drawn
from a weighted table of note values. The table is interpolated by
``complexity``: at 0.0 every step is a quarter note; towards 1.0 the weight
shifts to eighths, dotted eighths and sixteenths, and rests appear more often.

Steps never cross a bar line. When a drawn duration would overflow the bar,
the step is shortened to what is left of the bar and the next step starts on
the following downbeat.
"""

import dataclasses
import logging
import typing

import cantus.constants.durations as dur
import cantus.rng


logger = logging.getLogger(__name__)


TimeSignature = typing.Tuple[int, int]

# (duration in sub-beats, weight at complexity 0.0, weight at complexity 1.0)
DURATION_WEIGHTS: typing.List[typing.Tuple[int, float, float]] = [
	(dur.HALF,           0.0, 0.0),
	(dur.DOTTED_QUARTER, 0.0, 0.5),
	(dur.QUARTER,        1.0, 2.0),
	(dur.DOTTED_EIGHTH,  0.0, 1.5),
	(dur.EIGHTH,         0.0, 4.0),
	(dur.SIXTEENTH,      0.0, 3.0),
]

# Half notes only appear in the middle of the complexity range, where long
# held syllables give the line some breathing space.
HALF_NOTE_PEAK_WEIGHT = 0.6

MAX_REST_PROBABILITY = 0.25


@dataclasses.dataclass(frozen=True)
class RhythmStep:

	"""One rhythmic slot, sung or silent.

	Attributes:
		duration: Length in sub-beats (sixteenth notes), always positive.
		is_rest: True if the slot is silent. A rest still consumes its token.
	"""

	duration: int
	is_rest: bool = False


def sub_beats_per_beat (time_signature: TimeSignature) -> int:

	"""Return the number of sixteenths in one beat of the time signature."""

	_, beat_unit = time_signature

	return max(1, dur.WHOLE // beat_unit)


def sub_beats_per_bar (time_signature: TimeSignature) -> int:

	"""Return the number of sixteenths in one bar of the time signature."""

	beats_per_bar, _ = time_signature

	return beats_per_bar * sub_beats_per_beat(time_signature)


def sub_beat_seconds (tempo_bpm: float) -> float:

	"""Return the length of one sixteenth in seconds (tempo counts quarter notes)."""

	return 60.0 / (tempo_bpm * dur.SUB_BEATS_PER_QUARTER)


def duration_weights (complexity: float) -> typing.List[typing.Tuple[int, float]]:

	"""Return the (duration, weight) table for a complexity value.

	Example:
		```python
		duration_weights(0.0)  # [(4, 1.0)] - quarter notes only
		```
	"""

	c = min(1.0, max(0.0, complexity))
	table: typing.List[typing.Tuple[int, float]] = []

	for duration, low_weight, high_weight in DURATION_WEIGHTS:

		weight = (1.0 - c) * low_weight + c * high_weight

		if duration == dur.HALF:
			# Triangular bump peaking at 0.5.
			weight += HALF_NOTE_PEAK_WEIGHT * max(0.0, 1.0 - abs(c - 0.5) * 2.0)

		if weight > 0.0:
			table.append((duration, weight))

	return table


def rest_probability (complexity: float) -> float:

	"""Return the chance of any one step being a rest."""

	return MAX_REST_PROBABILITY * min(1.0, max(0.0, complexity))


def generate_rhythm (
	token_count: int,
	time_signature: TimeSignature,
	complexity: float,
	rng: cantus.rng.SeededRandom,
	bar_offset: int = 0,
) -> typing.List[RhythmStep]:

	"""Generate one rhythm step per token.

	Parameters:
		token_count: Number of tokens in the phrase. Zero gives an empty list.
		time_signature: ``(beats_per_bar, beat_unit)``.
		complexity: 0.0–1.0. Higher values mean shorter notes and more rests.
		rng: The generation run's random source.
		bar_offset: Sub-beats already used in the current bar when the
		            phrase starts.

	Returns:
		A list of steps whose durations are all positive and never cross a
		bar line.
	"""

	if token_count <= 0:
		return []

	bar_length = sub_beats_per_bar(time_signature)
	position = bar_offset % bar_length
	table = duration_weights(complexity)
	rest_chance = rest_probability(complexity)

	steps: typing.List[RhythmStep] = []

	for _ in range(token_count):

		duration = rng.weighted_choice(table)
		is_rest = rng.chance(rest_chance)

		remaining = bar_length - position

		if duration > remaining:
			# Truncate at the bar line; the next step starts on the downbeat.
			duration = remaining

		steps.append(RhythmStep(duration=duration, is_rest=is_rest))
		position = (position + duration) % bar_length

	logger.debug(f"Generated {len(steps)} rhythm steps ({sum(s.duration for s in steps)} sub-beats)")

	return steps
