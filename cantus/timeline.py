"""Song timeline records and the builder that assembles them.

A :class:`SongTimeline` is the immutable result of one generation call:
ordered note entries with absolute times, one chord per bar, and the
section map. Consumers (the MIDI encoder, a playback engine, a notation
renderer) only ever see finished timelines; the mutable
:class:`TimelineBuilder` is private to the composer while it works.
"""

import dataclasses
import typing

import cantus.chords
import cantus.intervals


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""
	One entry on the timeline: a sung note, a grace note, or a rest marker.

	Attributes:
		start_seconds: Absolute start time, ``>= 0``.
		duration_seconds: Length, ``> 0``.
		pitch: MIDI note number, or ``None`` for a rest marker.
		lyric: The syllable sung on this note (empty for ornaments). Rest
			markers keep the syllable their step consumed.
		velocity: Normalised attack strength, 0.0–1.0.
		is_ornament: True for grace notes inserted ahead of a host note.
	"""

	start_seconds: float
	duration_seconds: float
	pitch: typing.Optional[int]
	lyric: str = ""
	velocity: float = 0.7
	is_ornament: bool = False

	@property
	def end_seconds (self) -> float:

		"""Return the time at which the entry stops sounding."""

		return self.start_seconds + self.duration_seconds

	@property
	def is_rest (self) -> bool:

		"""Return True for silent marker entries."""

		return self.pitch is None


@dataclasses.dataclass(frozen=True)
class ChordEvent:

	"""
	The chord for one bar.

	Attributes:
		bar_index: Bar number, contiguous from 0.
		roman: Roman numeral for the scale degree (upper case = major).
		root_pc: Pitch class of the chord root.
		quality: ``"major"`` or ``"minor"``.
		pitch_classes: ``(root, third, fifth)`` pitch classes.
	"""

	bar_index: int
	roman: str
	root_pc: int
	quality: str
	pitch_classes: typing.Tuple[int, int, int]

	@property
	def name (self) -> str:

		"""Return a chord name such as ``"Am"``."""

		return cantus.chords.Chord(root_pc=self.root_pc, quality=self.quality).name()


@dataclasses.dataclass(frozen=True)
class Section:

	"""
	A named, bar-bounded region of the song.

	Attributes:
		name: Section name (e.g. ``"verse"``).
		label: The structure label that produced it (e.g. ``"A"``).
		start_bar: First bar of the section.
		bar_count: Number of bars, always positive.
		block_index: Which lyric block the section sings.
	"""

	name: str
	label: str
	start_bar: int
	bar_count: int
	block_index: int = 0

	@property
	def end_bar (self) -> int:

		"""Return the bar just after the section."""

		return self.start_bar + self.bar_count


@dataclasses.dataclass(frozen=True)
class SongTimeline:

	"""
	The finished song: tempo, meter, key, sections, chords and notes.

	Created once per generation call and never modified. ``to_dict()`` gives a
	plain structure for JSON export.
	"""

	tempo_bpm: float
	time_signature: typing.Tuple[int, int]
	key: cantus.intervals.ScaleSpec
	vocal_range: typing.Tuple[int, int]
	sections: typing.Tuple[Section, ...]
	chords: typing.Tuple[ChordEvent, ...]
	notes: typing.Tuple[NoteEvent, ...]
	total_bars: int
	total_duration_seconds: float

	@property
	def audible_notes (self) -> typing.Tuple[NoteEvent, ...]:

		"""Return the entries that actually sound (everything except rest markers)."""

		return tuple(note for note in self.notes if not note.is_rest)

	@property
	def bar_duration_seconds (self) -> float:

		"""Return the length of one bar in seconds."""

		beats_per_bar, beat_unit = self.time_signature

		return beats_per_bar * (4.0 / beat_unit) * 60.0 / self.tempo_bpm

	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Return the timeline as plain dicts and lists."""

		return {
			"tempo_bpm": self.tempo_bpm,
			"time_signature": list(self.time_signature),
			"key": {
				"name": self.key.name,
				"tonic_pc": self.key.tonic_pc,
				"mode": self.key.mode,
				"members": list(self.key.members),
			},
			"vocal_range": list(self.vocal_range),
			"sections": [dataclasses.asdict(section) for section in self.sections],
			"chords": [
				dict(dataclasses.asdict(chord), name=chord.name, pitch_classes=list(chord.pitch_classes))
				for chord in self.chords
			],
			"notes": [dataclasses.asdict(note) for note in self.notes],
			"total_bars": self.total_bars,
			"total_duration_seconds": self.total_duration_seconds,
		}


class TimelineBuilder:

	"""Accumulate notes and sections, then hand out one immutable timeline."""

	def __init__ (
		self,
		tempo_bpm: float,
		time_signature: typing.Tuple[int, int],
		key: cantus.intervals.ScaleSpec,
		vocal_range: typing.Tuple[int, int],
	) -> None:

		self.tempo_bpm = tempo_bpm
		self.time_signature = time_signature
		self.key = key
		self.vocal_range = vocal_range

		self._notes: typing.List[NoteEvent] = []
		self._sections: typing.List[Section] = []
		self._built = False

	@property
	def next_bar (self) -> int:

		"""Return the first bar not yet claimed by a section."""

		if not self._sections:
			return 0

		return self._sections[-1].end_bar

	def add_note (self, note: NoteEvent) -> None:

		"""Append a note entry; entries must arrive in start-time order."""

		self._check_open()

		if note.duration_seconds <= 0:
			raise ValueError(f"Note at {note.start_seconds:.3f}s has non-positive duration {note.duration_seconds}")

		if self._notes and note.start_seconds < self._notes[-1].start_seconds:
			raise ValueError(
				f"Note at {note.start_seconds:.3f}s starts before the previous note "
				f"({self._notes[-1].start_seconds:.3f}s)"
			)

		self._notes.append(note)

	def add_notes (self, notes: typing.Iterable[NoteEvent]) -> None:

		"""Append several note entries in order."""

		for note in notes:
			self.add_note(note)

	def add_section (self, section: Section) -> None:

		"""Append a section; it must start where the previous one ended."""

		self._check_open()

		if section.bar_count <= 0:
			raise ValueError(f"Section {section.name!r} must span at least one bar")

		if section.start_bar != self.next_bar:
			raise ValueError(
				f"Section {section.name!r} starts at bar {section.start_bar}, expected {self.next_bar}"
			)

		self._sections.append(section)

	def build (self, chords: typing.Sequence[ChordEvent]) -> SongTimeline:

		"""Freeze the accumulated state into a :class:`SongTimeline`.

		``chords`` must hold exactly one chord per bar covered by the sections.
		"""

		self._check_open()

		total_bars = self.next_bar

		if len(chords) != total_bars or any(chord.bar_index != i for i, chord in enumerate(chords)):
			raise ValueError(f"Expected one chord per bar for {total_bars} bars, got {len(chords)}")

		total_duration = self._notes[-1].end_seconds if self._notes else 0.0

		self._built = True

		return SongTimeline(
			tempo_bpm=self.tempo_bpm,
			time_signature=self.time_signature,
			key=self.key,
			vocal_range=self.vocal_range,
			sections=tuple(self._sections),
			chords=tuple(chords),
			notes=tuple(self._notes),
			total_bars=total_bars,
			total_duration_seconds=total_duration,
		)

	def _check_open (self) -> None:

		if self._built:
			raise ValueError("Timeline has already been built")
