"""Chord progressions: style templates, a random functional walk, and triads.

A style selects a cycle of scale degrees (1-based, so ``[1, 5, 6, 4]`` is
I–V–vi–IV). The ``"random"`` style builds its own 8-bar cycle by walking a
weighted graph of functional transitions. Either way the result is a
:class:`Progression` that answers ``chord_at(bar)`` for any bar, so the
composer can never run off the end of the chord sequence.

Triads are built from the scale itself: root on the degree, third two scale
steps up, fifth four steps up. The quality is read off the root–third
interval (3 semitones = minor, otherwise major).
"""

import logging
import typing

import cantus.intervals
import cantus.rng
import cantus.timeline


logger = logging.getLogger(__name__)


STYLE_TEMPLATES: typing.Dict[str, typing.List[int]] = {
	"pop": [1, 5, 6, 4],
	"ballad": [1, 6, 4, 5],
	"rock": [1, 4, 5, 4],
	"jazz": [2, 5, 1, 1],
	"canon": [1, 5, 6, 3, 4, 1, 4, 5],
	"blues": [1, 1, 1, 1, 4, 4, 1, 1, 5, 4, 1, 5],
	"minor": [1, 6, 3, 7],
}

RANDOM_STYLE = "random"
DEFAULT_STYLE = "pop"
RANDOM_CYCLE_BARS = 8

WEIGHT_STRONG = 6
WEIGHT_COMMON = 3
WEIGHT_DECEPTIVE = 2
WEIGHT_WEAK = 1

# Functional transitions between scale degrees, as used by the random walk.
DEGREE_TRANSITIONS: typing.Dict[int, typing.List[typing.Tuple[int, int]]] = {
	1: [(4, WEIGHT_COMMON), (5, WEIGHT_COMMON), (6, WEIGHT_COMMON), (2, WEIGHT_WEAK)],
	2: [(5, WEIGHT_STRONG), (4, WEIGHT_WEAK)],
	3: [(6, WEIGHT_COMMON), (4, WEIGHT_WEAK)],
	4: [(5, WEIGHT_STRONG), (2, WEIGHT_COMMON), (1, WEIGHT_WEAK)],
	5: [(1, WEIGHT_STRONG), (6, WEIGHT_DECEPTIVE)],
	6: [(2, WEIGHT_COMMON), (4, WEIGHT_COMMON), (5, WEIGHT_WEAK)],
	7: [(1, WEIGHT_STRONG)],
}

ROMAN_NUMERALS: typing.List[str] = ["I", "II", "III", "IV", "V", "VI", "VII"]

MINOR_THIRD = 3


def available_styles () -> typing.List[str]:

	"""Return every accepted style name."""

	return sorted(STYLE_TEMPLATES) + [RANDOM_STYLE]


def normalise_style (style: typing.Optional[str]) -> str:

	"""Return a known style name, falling back to ``"pop"`` with a warning."""

	name = style.strip().lower() if isinstance(style, str) else ""

	if name in STYLE_TEMPLATES or name == RANDOM_STYLE:
		return name

	logger.warning(f"Unknown chord style {style!r}, using {DEFAULT_STYLE!r}. Available: {available_styles()}")

	return DEFAULT_STYLE


def resolve_triad (scale: cantus.intervals.ScaleSpec, degree: int, bar_index: int = 0) -> cantus.timeline.ChordEvent:

	"""Build the diatonic triad on a 1-based scale degree.

	Example:
		```python
		c_major = cantus.intervals.build_scale("C", "major")
		chord = resolve_triad(c_major, 6)
		chord.roman          # "vi"
		chord.pitch_classes  # (9, 0, 4)
		chord.name           # "Am"
		```
	"""

	members = scale.members
	size = len(members)
	index = (degree - 1) % size

	root = members[index]
	third = members[(index + 2) % size]
	fifth = members[(index + 4) % size]

	quality = "minor" if (third - root) % 12 == MINOR_THIRD else "major"
	numeral = ROMAN_NUMERALS[index % len(ROMAN_NUMERALS)]
	roman = numeral.lower() if quality == "minor" else numeral

	return cantus.timeline.ChordEvent(
		bar_index=bar_index,
		roman=roman,
		root_pc=root,
		quality=quality,
		pitch_classes=(root, third, fifth),
	)


def random_walk_degrees (rng: cantus.rng.SeededRandom, length: int = RANDOM_CYCLE_BARS) -> typing.List[int]:

	"""Walk the functional transition graph from the tonic for ``length`` bars."""

	degrees = [1]

	while len(degrees) < length:
		options = DEGREE_TRANSITIONS.get(degrees[-1])

		if not options:
			# No outgoing edges: stay on the current degree.
			degrees.append(degrees[-1])
			continue

		degrees.append(rng.weighted_choice(options))

	return degrees[:length]


class Progression:

	"""A repeating cycle of scale-degree chords resolved against one scale."""

	def __init__ (self, scale: cantus.intervals.ScaleSpec, degrees: typing.Sequence[int], style: str = DEFAULT_STYLE) -> None:

		if not degrees:
			raise ValueError("A progression needs at least one degree")

		self.scale = scale
		self.style = style
		self.degrees: typing.Tuple[int, ...] = tuple(degrees)

	def degree_at (self, bar: int) -> int:

		"""Return the scale degree played in a bar."""

		if bar < 0:
			raise ValueError(f"Bar index must be non-negative, got {bar}")

		return self.degrees[bar % len(self.degrees)]

	def chord_at (self, bar: int) -> cantus.timeline.ChordEvent:

		"""Return the chord for any non-negative bar."""

		return resolve_triad(self.scale, self.degree_at(bar), bar_index=bar)

	def events (self, total_bars: int) -> typing.List[cantus.timeline.ChordEvent]:

		"""Return exactly one chord per bar for ``total_bars`` bars."""

		return [self.chord_at(bar) for bar in range(max(0, total_bars))]


def generate_progression (
	scale: cantus.intervals.ScaleSpec,
	style: typing.Optional[str],
	rng: cantus.rng.SeededRandom,
) -> Progression:

	"""Create the progression for a song.

	Template styles consume no randomness. The ``"random"`` style draws its
	cycle from ``rng`` once, up front.
	"""

	name = normalise_style(style)

	if name == RANDOM_STYLE:
		degrees = random_walk_degrees(rng)
	else:
		degrees = STYLE_TEMPLATES[name]

	logger.debug(f"Progression ({name}): {degrees}")

	return Progression(scale, degrees, style=name)
