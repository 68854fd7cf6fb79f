"""Melodic context and melody generation for sung lines.

Provides :class:`MelodicState`, which remembers the previous pitch across
lines so that a song reads as one continuous melody, and
:func:`generate_melody`, which turns a line's rhythm steps and tokens into
timed :class:`~cantus.timeline.NoteEvent` entries.

Each new pitch is ``previous + interval``. Interval sizes come from a
weighted table that strongly favours steps; ``complexity`` fattens the tail
of leaps. The raw target is snapped to the scale and then folded into the
vocal range by whole octaves, so the melody keeps its pitch class rather
than piling up on the range edge.

Ornaments (grace notes) only appear above a complexity of 0.5. A grace note
sits two scale steps above or below its host, takes a quarter of the host's
time, and never carries a syllable.
"""

import logging
import typing

import cantus.constants.velocity
import cantus.harmony
import cantus.intervals
import cantus.lyrics
import cantus.rhythm
import cantus.rng
import cantus.timeline


logger = logging.getLogger(__name__)


# (semitones, weight at complexity 0.0, weight at complexity 1.0)
INTERVAL_WEIGHTS: typing.List[typing.Tuple[int, float, float]] = [
	(0, 2.0, 1.0),
	(1, 3.0, 2.5),
	(2, 4.0, 3.0),
	(3, 0.6, 2.0),
	(4, 0.4, 1.6),
	(5, 0.3, 1.2),
	(7, 0.0, 0.8),
	(9, 0.0, 0.4),
	(12, 0.0, 0.3),
]

ORNAMENT_THRESHOLD = 0.5
MAX_ORNAMENT_PROBABILITY = 0.6
ORNAMENT_FRACTION = 0.25
ORNAMENT_SCALE_STEPS = 2

# Chance of landing on a chord tone at the start of a bar.
DOWNBEAT_CHORD_GRAVITY = 0.5

# How hard the melody is pulled back toward the centre of the range.
RANGE_GRAVITY = 0.3


class MelodicState:

	"""Persistent melodic context for one song: scale, range, and previous pitch."""

	def __init__ (
		self,
		scale: cantus.intervals.ScaleSpec,
		low: int,
		high: int,
		complexity: float = 0.5,
		previous: typing.Optional[int] = None,
	) -> None:

		"""Initialise the state for a scale and an inclusive MIDI range.

		Parameters:
			scale: The song's scale.
			low: Lowest allowed MIDI note.
			high: Highest allowed MIDI note. ``high - low`` must be at least 11
			      so every pitch class fits inside the range.
			complexity: 0.0–1.0. Widens the leap distribution and enables
			      ornaments above 0.5.
			previous: Starting pitch. Defaults to the scale pitch nearest the
			      centre of the range.
		"""

		if high - low < 11:
			raise ValueError(f"Vocal range {low}-{high} is narrower than an octave")

		self.scale = scale
		self.low = low
		self.high = high
		self.complexity = min(1.0, max(0.0, complexity))

		self.centre: float = (low + high) / 2.0

		if previous is None:
			previous = self.fold(scale.nearest_member(int(round(self.centre))))

		self.previous: int = previous

		self._interval_table: typing.List[typing.Tuple[int, float]] = [
			(semitones, (1.0 - self.complexity) * low_weight + self.complexity * high_weight)
			for semitones, low_weight, high_weight in INTERVAL_WEIGHTS
			if (1.0 - self.complexity) * low_weight + self.complexity * high_weight > 0.0
		]

	@property
	def ornament_probability (self) -> float:

		"""Return the chance of a grace note before an eligible host note."""

		if self.complexity <= ORNAMENT_THRESHOLD:
			return 0.0

		return MAX_ORNAMENT_PROBABILITY * (self.complexity - ORNAMENT_THRESHOLD) / (1.0 - ORNAMENT_THRESHOLD)

	def fold (self, pitch: int) -> int:

		"""Move a pitch into [low, high] by whole octaves."""

		while pitch > self.high:
			pitch -= 12

		while pitch < self.low:
			pitch += 12

		return pitch

	def next_pitch (
		self,
		rng: cantus.rng.SeededRandom,
		chord_tones: typing.Optional[typing.Sequence[int]] = None,
		downbeat: bool = False,
	) -> int:

		"""Choose the next melody pitch and remember it."""

		magnitude = rng.weighted_choice(self._interval_table)

		# Above the centre, lean downward; below it, lean upward.
		half_range = max(1.0, (self.high - self.low) / 2.0)
		offset_ratio = (self.previous - self.centre) / half_range
		up_probability = min(0.9, max(0.1, 0.5 - RANGE_GRAVITY * offset_ratio))
		direction = 1 if rng.random() < up_probability else -1

		target = self.previous + direction * magnitude
		pitch = self.fold(self.scale.nearest_member(target))

		if downbeat and chord_tones and rng.chance(DOWNBEAT_CHORD_GRAVITY):
			pitch = self._nearest_chord_tone(pitch, chord_tones)

		self.previous = pitch

		return pitch

	def _nearest_chord_tone (self, pitch: int, chord_tones: typing.Sequence[int]) -> int:

		pcs = {tone % 12 for tone in chord_tones}
		candidates = [p for p in range(self.low, self.high + 1) if p % 12 in pcs]

		if not candidates:
			return pitch

		# Lower pitch wins ties, matching scale snapping.
		return min(candidates, key=lambda p: (abs(p - pitch), p))

	def ornament_pitch (self, host: int, rng: cantus.rng.SeededRandom) -> int:

		"""Return a neighbour two scale steps above or below the host, in range."""

		steps = rng.choice((ORNAMENT_SCALE_STEPS, -ORNAMENT_SCALE_STEPS))

		return self.fold(self.scale.step(host, steps))


def note_velocity (position_in_bar: int, beat_length: int, complexity: float, rng: cantus.rng.SeededRandom) -> float:

	"""Return a normalised velocity from the metric position plus a little jitter."""

	v = cantus.constants.velocity.BASE_VELOCITY

	if position_in_bar == 0:
		v += cantus.constants.velocity.DOWNBEAT_ACCENT
	elif position_in_bar % beat_length == 0:
		v += cantus.constants.velocity.BEAT_ACCENT

	jitter = cantus.constants.velocity.VELOCITY_JITTER * complexity
	v += rng.uniform(-jitter, jitter)

	return min(1.0, max(0.0, v))


def generate_melody (
	steps: typing.Sequence[cantus.rhythm.RhythmStep],
	tokens: typing.Sequence[cantus.lyrics.Token],
	state: MelodicState,
	rng: cantus.rng.SeededRandom,
	start_sub_beat: int,
	tempo_bpm: float,
	time_signature: cantus.rhythm.TimeSignature,
	progression: typing.Optional[cantus.harmony.Progression] = None,
) -> typing.List[cantus.timeline.NoteEvent]:

	"""Turn one line's rhythm and tokens into timed note entries.

	Steps and tokens pair up one to one. A rest step consumes its token and
	yields a marker entry (``pitch=None``) carrying that token's text; the
	placeholder token produces nothing at all.

	Parameters:
		steps: Rhythm for the line, from :func:`cantus.rhythm.generate_rhythm`.
		tokens: The line's tokens.
		state: The song's melodic state; updated in place.
		rng: The generation run's random source.
		start_sub_beat: Absolute position of the first step, in sub-beats.
		tempo_bpm: Quarter-note tempo used to convert sub-beats to seconds.
		time_signature: ``(beats_per_bar, beat_unit)``.
		progression: Chords to lean on at bar starts, if any.

	Returns:
		Note entries in non-decreasing start order.
	"""

	if len(steps) != len(tokens):
		raise ValueError(f"Rhythm has {len(steps)} steps for {len(tokens)} tokens")

	seconds_per_sub_beat = cantus.rhythm.sub_beat_seconds(tempo_bpm)
	bar_length = cantus.rhythm.sub_beats_per_bar(time_signature)
	beat_length = cantus.rhythm.sub_beats_per_beat(time_signature)

	events: typing.List[cantus.timeline.NoteEvent] = []
	position = start_sub_beat

	for step, token in zip(steps, tokens):

		start = position * seconds_per_sub_beat
		duration = step.duration * seconds_per_sub_beat
		bar_index, position_in_bar = divmod(position, bar_length)
		position += step.duration

		if token.placeholder:
			continue

		if step.is_rest:
			events.append(cantus.timeline.NoteEvent(
				start_seconds=start,
				duration_seconds=duration,
				pitch=None,
				lyric=token.text,
				velocity=0.0,
			))
			continue

		downbeat = position_in_bar == 0
		chord_tones = None

		if progression is not None and downbeat:
			chord_tones = progression.chord_at(bar_index).pitch_classes

		pitch = state.next_pitch(rng, chord_tones=chord_tones, downbeat=downbeat)
		velocity = note_velocity(position_in_bar, beat_length, state.complexity, rng)

		if step.duration >= 2 and rng.chance(state.ornament_probability):

			grace_duration = duration * ORNAMENT_FRACTION

			events.append(cantus.timeline.NoteEvent(
				start_seconds=start,
				duration_seconds=grace_duration,
				pitch=state.ornament_pitch(pitch, rng),
				lyric="",
				velocity=cantus.constants.velocity.ORNAMENT_VELOCITY,
				is_ornament=True,
			))

			start += grace_duration
			duration -= grace_duration

		events.append(cantus.timeline.NoteEvent(
			start_seconds=start,
			duration_seconds=duration,
			pitch=pitch,
			lyric=token.text,
			velocity=velocity,
		))

	logger.debug(f"Generated {len(events)} melody entries from {len(steps)} steps")

	return events
