"""Scale definitions, the scale builder, and scale snapping.

:func:`build_scale` turns a tonic and mode into an immutable
:class:`ScaleSpec`. Unknown tonics or modes never raise: the builder logs a
warning and falls back to C major so that raw user input always produces a
usable scale.

Snapping (:func:`nearest_member`) compares the candidate against scale
pitches in its own octave and the octaves either side. When two scale pitches
are equally close the **lower** one wins, so C# in C major snaps to C.
"""

import dataclasses
import logging
import typing

import cantus.chords


logger = logging.getLogger(__name__)


INTERVAL_DEFINITIONS: typing.Dict[str, typing.List[int]] = {
	"dorian_mode": [0, 2, 3, 5, 7, 9, 10],
	"harmonic_minor": [0, 2, 3, 5, 7, 8, 11],
	"locrian_mode": [0, 1, 3, 5, 6, 8, 10],
	"lydian": [0, 2, 4, 6, 7, 9, 11],
	"major_ionian": [0, 2, 4, 5, 7, 9, 11],
	"melodic_minor": [0, 2, 3, 5, 7, 9, 11],
	"mixolydian": [0, 2, 4, 5, 7, 9, 10],
	"natural_minor": [0, 2, 3, 5, 7, 8, 10],
	"phrygian_mode": [0, 1, 3, 5, 7, 8, 10],
}


# Map mode names to scale interval keys.
MODE_MAP: typing.Dict[str, str] = {
	"ionian":         "major_ionian",
	"major":          "major_ionian",
	"dorian":         "dorian_mode",
	"phrygian":       "phrygian_mode",
	"lydian":         "lydian",
	"mixolydian":     "mixolydian",
	"aeolian":        "natural_minor",
	"minor":          "natural_minor",
	"locrian":        "locrian_mode",
	"harmonic_minor": "harmonic_minor",
	"melodic_minor":  "melodic_minor",
}

DEFAULT_TONIC_PC = 0
DEFAULT_MODE = "major"


@dataclasses.dataclass(frozen=True)
class ScaleSpec:

	"""
	An immutable scale: tonic pitch class, mode name, and member pitch classes.

	Attributes:
		tonic_pc: Root pitch class (0 = C, 1 = C#/Db, …, 11 = B).
		mode: Normalised mode name (``"major"``, ``"minor"``, ``"dorian"``, …).
		members: Pitch classes of one octave, ordered upward from the tonic.

	Example:
		```python
		scale = build_scale("A", "minor")
		scale.members            # (9, 11, 0, 2, 4, 5, 7)
		scale.nearest_member(61) # → 60
		scale.step(60, 2)        # → 64 (C → E, two scale steps up)
		```
	"""

	tonic_pc: int
	mode: str
	members: typing.Tuple[int, ...]

	@property
	def name (self) -> str:

		"""Return a readable key name such as ``"C major"``."""

		return f"{cantus.chords.PC_TO_NOTE_NAME[self.tonic_pc]} {self.mode}"

	def contains (self, pitch: int) -> bool:

		"""Return True if the pitch's class belongs to the scale."""

		return pitch % 12 in self.members

	def nearest_member (self, pitch: int) -> int:

		"""Snap a MIDI pitch to the nearest scale pitch (ties go lower)."""

		return nearest_member(self, pitch)

	def degree_of (self, pitch: int) -> int:

		"""Return the 0-based scale degree of an in-scale pitch."""

		pc = pitch % 12

		if pc not in self.members:
			raise ValueError(f"Pitch {pitch} is not in {self.name}")

		return self.members.index(pc)

	def step (self, pitch: int, steps: int) -> int:

		"""Move an in-scale pitch by a number of scale steps (negative goes down).

		Octaves are crossed naturally: one step up from B in C major is the C
		above it.
		"""

		size = len(self.members)
		index = self.degree_of(pitch)
		pc = pitch % 12
		octave_base = pitch - ((pc - self.tonic_pc) % 12)

		target = index + steps
		octaves, target_index = divmod(target, size)
		offset = (self.members[target_index] - self.tonic_pc) % 12

		return octave_base + 12 * octaves + offset


def get_intervals (name: str) -> typing.List[int]:

	"""
	Return a named interval list from the registry.
	"""

	if name not in INTERVAL_DEFINITIONS:
		raise ValueError(f"Unknown interval set: {name}")

	return list(INTERVAL_DEFINITIONS[name])


def normalise_mode (mode: typing.Optional[str]) -> typing.Optional[str]:

	"""Return the canonical mode name, or None if the mode is unknown."""

	if not isinstance(mode, str):
		return None

	key = mode.strip().lower().replace(" ", "_").replace("-", "_")

	return key if key in MODE_MAP else None


def scale_pitch_classes (key_pc: int, mode: str = "major") -> typing.List[int]:

	"""
	Return the pitch classes (0–11) that belong to a key and mode.

	Parameters:
		key_pc: Root pitch class (0 = C, 1 = C#/Db, …, 11 = B).
		mode: Scale mode name, any key of ``MODE_MAP``.

	Returns:
		Pitch classes ordered upward from the tonic.

	Example:
		```python
		scale_pitch_classes(9, "minor")  # → [9, 11, 0, 2, 4, 5, 7]
		```
	"""

	if mode not in MODE_MAP:
		raise ValueError(f"Unknown mode '{mode}'. Available: {sorted(MODE_MAP)}")

	intervals = get_intervals(MODE_MAP[mode])
	return [(key_pc + i) % 12 for i in intervals]


def build_scale (tonic: typing.Union[str, int, None] = "C", mode: typing.Optional[str] = DEFAULT_MODE) -> ScaleSpec:

	"""Build a :class:`ScaleSpec` from a tonic and mode.

	Unrecognised input is recovered, not raised: an unknown tonic or mode
	gives C major.

	Parameters:
		tonic: Note name (``"C"``, ``"F#"``, ``"bb"``) or pitch class integer.
		mode: Mode name (``"major"``, ``"minor"``, ``"dorian"``, …).

	Example:
		```python
		build_scale("D", "dorian").members  # (2, 4, 5, 7, 9, 11, 0)
		build_scale("H", "major").name      # "C major" (fallback)
		```
	"""

	tonic_pc = cantus.chords.parse_tonic(tonic)
	mode_name = normalise_mode(mode)

	if tonic_pc is None or mode_name is None:
		logger.warning(f"Unrecognised key {tonic!r} {mode!r}, falling back to C major")
		tonic_pc = DEFAULT_TONIC_PC
		mode_name = DEFAULT_MODE

	members = tuple(scale_pitch_classes(tonic_pc, mode_name))

	return ScaleSpec(tonic_pc=tonic_pc, mode=mode_name, members=members)


def nearest_member (scale: ScaleSpec, pitch: int) -> int:

	"""
	Snap a MIDI pitch to the nearest pitch in the scale.

	Candidates are the scale pitches in the pitch's own octave plus one
	octave below and one above. The candidate with the smallest absolute
	semitone distance wins; on an exact tie the lower pitch is returned.

	Example:
		```python
		c_major = build_scale("C", "major")
		nearest_member(c_major, 61)  # → 60 (C# is equidistant from C and D)
		nearest_member(c_major, 70)  # → 69 (Bb is equidistant from A and B)
		nearest_member(c_major, 64)  # → 64
		```
	"""

	octave_base = pitch - (pitch % 12)
	best: typing.Optional[int] = None
	best_distance = 0

	for octave_shift in (-12, 0, 12):
		for pc in scale.members:
			candidate = octave_base + octave_shift + pc
			distance = abs(candidate - pitch)

			if best is None or distance < best_distance or (distance == best_distance and candidate < best):
				best = candidate
				best_distance = distance

	assert best is not None

	return best
