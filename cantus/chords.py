"""Chord definitions and pitch class utilities.

This module provides note-name/pitch-class mappings and the `Chord` class
used to name the triads produced by the progression generator.

Module-level constants:
- `NOTE_NAME_TO_PC`: Maps note names (e.g., `"C"`, `"F#"`, `"Bb"`) to pitch classes (0-11)
- `PC_TO_NOTE_NAME`: Maps pitch classes to note names
- `CHORD_SUFFIX`: Maps chord quality names to human-readable suffixes (e.g., `"m"`)

Module-level helpers:
- `parse_tonic(value)`: Turn a note name or integer into a pitch class, or
  ``None`` when the value is not recognised. Callers decide the fallback.
"""

import dataclasses
import typing


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]


def parse_tonic (value: typing.Union[str, int, None]) -> typing.Optional[int]:

	"""Return the pitch class (0–11) for a note name or integer.

	Note names are matched with a case-insensitive letter (``"c"``, ``"f#"``,
	``"Bb"``, ``"bb"``). Integers are reduced modulo 12. Anything else returns
	``None``.

	Example:
		```python
		parse_tonic("F#")  # → 6
		parse_tonic("bb")  # → 10
		parse_tonic(14)    # → 2
		parse_tonic("H")   # → None
		```
	"""

	if isinstance(value, bool):
		return None

	if isinstance(value, int):
		return value % 12

	if not isinstance(value, str):
		return None

	name = value.strip()

	if not name:
		return None

	name = name[0].upper() + name[1:]

	return NOTE_NAME_TO_PC.get(name)


CHORD_SUFFIX: typing.Dict[str, str] = {
	"major": "",
	"minor": "m",
}


@dataclasses.dataclass(frozen=True)
class Chord:

	"""
	Represents a chord as a root pitch class and quality.
	"""

	root_pc: int
	quality: str


	def name (self) -> str:

		"""
		Return a human-friendly chord name.
		"""

		root_name = PC_TO_NOTE_NAME[self.root_pc % 12]
		suffix = CHORD_SUFFIX.get(self.quality, "")

		return f"{root_name}{suffix}"
