"""Generation parameters.

:class:`SongConfig` enumerates every knob the generator understands and
normalises them once, at construction. Out-of-range numbers are clamped and
unknown names fall back to defaults; each correction is logged as a warning
so a caller can see what was changed, but nothing here ever raises on user
input.
"""

import dataclasses
import logging
import math
import typing

import cantus.chords
import cantus.harmony
import cantus.intervals


logger = logging.getLogger(__name__)


MIN_TEMPO = 20.0
MAX_TEMPO = 300.0
MIN_BEATS_PER_BAR = 1
MAX_BEATS_PER_BAR = 16
VALID_BEAT_UNITS = (1, 2, 4, 8, 16)
MIN_VOCAL_CENTER = 36
MAX_VOCAL_CENTER = 96
MIN_VOCAL_RANGE = 12
MAX_VOCAL_RANGE = 36

DEFAULT_TIME_SIGNATURE = (4, 4)
DEFAULT_STRUCTURE = "A"

# camelCase names accepted by from_dict(), mapped to field names.
FIELD_ALIASES: typing.Dict[str, str] = {
	"tempoBPM": "tempo_bpm",
	"tempo": "tempo_bpm",
	"timeSignature": "time_signature",
	"keyTonic": "key_tonic",
	"key": "key_tonic",
	"keyMode": "key_mode",
	"mode": "key_mode",
	"vocalCenter": "vocal_center",
	"vocalRangeSemitones": "vocal_range_semitones",
}


def _clamp (value: float, low: float, high: float) -> float:

	return max(low, min(high, value))


def _number (value: typing.Any, default: float, label: str) -> float:

	try:
		number = float(value)
	except (TypeError, ValueError):
		logger.warning(f"{label.capitalize()} {value!r} is not a number, using {default}")
		return default

	if math.isnan(number) or math.isinf(number):
		logger.warning(f"{label.capitalize()} {value!r} is not finite, using {default}")
		return default

	return number


def parse_time_signature (value: typing.Any) -> typing.Tuple[int, int]:

	"""Parse ``"N/D"`` or ``(N, D)`` into a valid time signature.

	Beats per bar are clamped to 1–16. A beat unit that is not 1, 2, 4, 8 or
	16 is replaced with 4. Unparseable input gives 4/4.

	Example:
		```python
		parse_time_signature("3/4")   # (3, 4)
		parse_time_signature("6/8")   # (6, 8)
		parse_time_signature("7/5")   # (7, 4)
		parse_time_signature("waltz") # (4, 4)
		```
	"""

	try:
		if isinstance(value, str):
			numerator_text, denominator_text = value.split("/")
			numerator, denominator = int(numerator_text), int(denominator_text)
		else:
			numerator, denominator = (int(part) for part in value)

	except (TypeError, ValueError):
		logger.warning(f"Unparseable time signature {value!r}, using 4/4")
		return DEFAULT_TIME_SIGNATURE

	beats = int(_clamp(numerator, MIN_BEATS_PER_BAR, MAX_BEATS_PER_BAR))

	if beats != numerator:
		logger.warning(f"Beats per bar {numerator} clamped to {beats}")

	if denominator not in VALID_BEAT_UNITS:
		logger.warning(f"Beat unit {denominator} is not a power of two up to 16, using 4")
		denominator = 4

	return beats, denominator


@dataclasses.dataclass(frozen=True)
class SongConfig:

	"""
	Every parameter of one generation run, validated at construction.

	Attributes:
		seed: Determinism key; masked to 32 bits.
		tempo_bpm: Quarter notes per minute, clamped to 20–300.
		time_signature: ``(beats_per_bar, beat_unit)``; ``"3/4"`` strings accepted.
		key_tonic: Tonic note name or pitch class; unknown → ``"C"``.
		key_mode: Mode name; unknown → ``"major"``.
		complexity: 0.0–1.0. Rhythmic density, leap size, ornament and rest frequency.
		vocal_center: MIDI note at the middle of the singing range.
		vocal_range_semitones: Width of the singing range, clamped to 12–36.
		style: Chord progression style; unknown → ``"pop"``.
		structure: Section labels such as ``"A A B A"``.

	Example:
		```python
		config = SongConfig(seed=7, time_signature="3/4", key_tonic="D", key_mode="minor")
		config.time_signature  # (3, 4)
		config.vocal_range     # (55, 69)
		```
	"""

	seed: int = 1
	tempo_bpm: float = 120.0
	time_signature: typing.Any = DEFAULT_TIME_SIGNATURE
	key_tonic: typing.Union[str, int] = "C"
	key_mode: str = "major"
	complexity: float = 0.5
	vocal_center: int = 62
	vocal_range_semitones: int = 14
	style: str = cantus.harmony.DEFAULT_STYLE
	structure: str = DEFAULT_STRUCTURE

	def __post_init__ (self) -> None:

		# Frozen dataclass: normalised values are written with object.__setattr__.
		if isinstance(self.seed, int) and not isinstance(self.seed, bool):
			seed = self.seed
		else:
			seed = int(_number(self.seed, 1, "seed"))

		object.__setattr__(self, "seed", seed & 0xFFFFFFFF)

		tempo = _number(self.tempo_bpm, 120.0, "tempo")
		clamped_tempo = _clamp(tempo, MIN_TEMPO, MAX_TEMPO)

		if clamped_tempo != tempo:
			logger.warning(f"Tempo {tempo} clamped to {clamped_tempo}")

		object.__setattr__(self, "tempo_bpm", clamped_tempo)
		object.__setattr__(self, "time_signature", parse_time_signature(self.time_signature))

		tonic_pc = cantus.chords.parse_tonic(self.key_tonic)

		if tonic_pc is None:
			logger.warning(f"Unknown key tonic {self.key_tonic!r}, using C")
			tonic = "C"
		elif isinstance(self.key_tonic, int):
			tonic = cantus.chords.PC_TO_NOTE_NAME[tonic_pc]
		else:
			name = self.key_tonic.strip()
			tonic = name[0].upper() + name[1:]

		object.__setattr__(self, "key_tonic", tonic)

		mode = cantus.intervals.normalise_mode(self.key_mode)

		if mode is None:
			logger.warning(f"Unknown key mode {self.key_mode!r}, using major")
			mode = cantus.intervals.DEFAULT_MODE

		object.__setattr__(self, "key_mode", mode)

		complexity = _number(self.complexity, 0.5, "complexity")
		object.__setattr__(self, "complexity", _clamp(complexity, 0.0, 1.0))

		center = int(_number(self.vocal_center, 62, "vocal center"))
		object.__setattr__(self, "vocal_center", int(_clamp(center, MIN_VOCAL_CENTER, MAX_VOCAL_CENTER)))

		width = int(_number(self.vocal_range_semitones, 14, "vocal range"))
		object.__setattr__(self, "vocal_range_semitones", int(_clamp(width, MIN_VOCAL_RANGE, MAX_VOCAL_RANGE)))

		object.__setattr__(self, "style", cantus.harmony.normalise_style(self.style))

		structure = self.structure.strip() if isinstance(self.structure, str) else ""
		object.__setattr__(self, "structure", structure or DEFAULT_STRUCTURE)

	@property
	def vocal_range (self) -> typing.Tuple[int, int]:

		"""Return the inclusive ``(low, high)`` MIDI range for the melody."""

		low = self.vocal_center - self.vocal_range_semitones // 2
		high = low + self.vocal_range_semitones

		return low, high

	@property
	def scale (self) -> cantus.intervals.ScaleSpec:

		"""Return the scale for the configured key."""

		return cantus.intervals.build_scale(self.key_tonic, self.key_mode)

	@classmethod
	def from_dict (cls, values: typing.Optional[typing.Mapping[str, typing.Any]]) -> "SongConfig":

		"""Build a config from a mapping, e.g. a parsed YAML file.

		Both snake_case field names and the camelCase parameter names
		(``tempoBPM``, ``keyTonic``, ...) are accepted. Unknown keys are
		ignored with a warning.
		"""

		field_names = {field.name for field in dataclasses.fields(cls)}
		kwargs: typing.Dict[str, typing.Any] = {}

		for key, value in (values or {}).items():
			name = FIELD_ALIASES.get(key, key)

			if name not in field_names:
				logger.warning(f"Ignoring unknown config key {key!r}")
				continue

			kwargs[name] = value

		return cls(**kwargs)

	def replace (self, **changes: typing.Any) -> "SongConfig":

		"""Return a copy with some fields changed (and re-validated)."""

		return dataclasses.replace(self, **changes)
