"""Standard MIDI File encoder for song timelines.

:func:`encode_timeline` serializes a :class:`~cantus.timeline.SongTimeline`
into a format 0 (single track) Standard MIDI File. The byte layout is fixed:

- ``MThd`` header chunk: length 6, format 0, one track, 480 ticks per quarter.
- ``MTrk`` track chunk: 4-byte big-endian length, then the events:
  tempo meta, time-signature meta, program change, note-on/note-off pairs,
  end-of-track meta.

Each event is preceded by its delta time as a variable-length quantity
(:func:`encode_vlq`). Message bodies are produced by :mod:`mido` message
objects so the status bytes and meta encodings match what every other tool
expects. At equal ticks, note-offs are written before note-ons so a note that
ends exactly where the next one (of the same pitch) begins does not cut it
off.

The encoder refuses malformed timelines - a note with a non-positive
duration, a negative start, a pitch outside 0–127, or notes out of order -
by raising :class:`EncodingError` naming the offending entry.
"""

import logging
import pathlib
import struct
import typing

import mido

import cantus.constants.midi
import cantus.constants.velocity
import cantus.timeline


logger = logging.getLogger(__name__)


PPQ = cantus.constants.midi.TICKS_PER_QUARTER

# Octave the accompaniment triads are rooted around (C3).
CHORD_ROOT_NOTE = cantus.constants.midi.MIDDLE_C - 12

_PRIORITY_SETUP = 0
_PRIORITY_NOTE_OFF = 1
_PRIORITY_NOTE_ON = 2


class EncodingError (ValueError):

	"""Raised when a timeline cannot be encoded without producing a corrupt file."""


def encode_vlq (value: int) -> bytes:

	"""Encode a non-negative integer as a MIDI variable-length quantity.

	Seven bits per byte, most significant group first, with the high bit set
	on every byte except the last.

	Example:
		```python
		encode_vlq(0)          # b"\\x00"
		encode_vlq(128)        # b"\\x81\\x00"
		encode_vlq(0x0FFFFFFF) # b"\\xff\\xff\\xff\\x7f"
		```
	"""

	if value < 0:
		raise ValueError(f"Variable-length quantity cannot be negative: {value}")

	if value > cantus.constants.midi.MAX_VLQ_VALUE:
		raise ValueError(f"Variable-length quantity too large: {value}")

	groups = [value & 0x7F]
	value >>= 7

	while value:
		groups.append((value & 0x7F) | 0x80)
		value >>= 7

	return bytes(reversed(groups))


def decode_vlq (data: bytes, offset: int = 0) -> typing.Tuple[int, int]:

	"""Decode a variable-length quantity; return ``(value, next_offset)``."""

	value = 0

	for length in range(4):

		if offset + length >= len(data):
			raise ValueError("Truncated variable-length quantity")

		byte = data[offset + length]
		value = (value << 7) | (byte & 0x7F)

		if not byte & 0x80:
			return value, offset + length + 1

	raise ValueError("Variable-length quantity longer than four bytes")


def seconds_to_ticks (seconds: float, tempo_bpm: float) -> int:

	"""Convert seconds to ticks at a fixed tempo and 480 ticks per quarter."""

	return int(round(seconds * tempo_bpm * PPQ / 60.0))


def tempo_to_microseconds (tempo_bpm: float) -> int:

	"""Return the tempo meta value: microseconds per quarter note."""

	return mido.bpm2tempo(tempo_bpm)


def midi_velocity (velocity: float) -> int:

	"""Map a normalised velocity onto 1–127 (0 would read as a note-off)."""

	value = int(round(velocity * cantus.constants.velocity.MAX_MIDI_VELOCITY))

	return max(cantus.constants.velocity.MIN_MIDI_VELOCITY, min(cantus.constants.velocity.MAX_MIDI_VELOCITY, value))


def _validate (timeline: cantus.timeline.SongTimeline) -> None:

	previous_start = 0.0

	for index, note in enumerate(timeline.notes):

		where = f"note {index} (start {note.start_seconds!r}s, pitch {note.pitch!r}, lyric {note.lyric!r})"

		if note.start_seconds < 0:
			raise EncodingError(f"{where} has a negative start time")

		if note.start_seconds < previous_start:
			raise EncodingError(f"{where} starts before the previous note ({previous_start!r}s)")

		previous_start = note.start_seconds

		if note.is_rest:
			continue

		if not note.duration_seconds > 0:
			raise EncodingError(f"{where} has non-positive duration {note.duration_seconds!r}")

		if not cantus.constants.midi.MIN_NOTE <= note.pitch <= cantus.constants.midi.MAX_NOTE:
			raise EncodingError(f"{where} has a pitch outside 0-127")


def _note_span (start_seconds: float, duration_seconds: float, tempo_bpm: float) -> typing.Tuple[int, int]:

	on_tick = seconds_to_ticks(start_seconds, tempo_bpm)
	off_tick = seconds_to_ticks(start_seconds + duration_seconds, tempo_bpm)

	# Very short notes can round to zero ticks; keep them one tick long.
	if off_tick <= on_tick:
		off_tick = on_tick + 1

	return on_tick, off_tick


def _chord_voicing (chord: cantus.timeline.ChordEvent) -> typing.List[int]:

	root_pc, third_pc, fifth_pc = chord.pitch_classes

	offset = (root_pc - CHORD_ROOT_NOTE) % 12
	if offset > 6:
		offset -= 12

	root = CHORD_ROOT_NOTE + offset

	return [root, root + (third_pc - root_pc) % 12, root + (fifth_pc - root_pc) % 12]


def encode_track_events (
	timeline: cantus.timeline.SongTimeline,
	program: int = 0,
	channel: int = 0,
	chord_channel: typing.Optional[int] = None,
) -> bytes:

	"""Return the event stream of the track chunk (everything after its length)."""

	_validate(timeline)

	if not 0 <= channel <= 15:
		raise EncodingError(f"Channel {channel} outside 0-15")

	if chord_channel is not None and not 0 <= chord_channel <= 15:
		raise EncodingError(f"Chord channel {chord_channel} outside 0-15")

	if not 0 <= program <= 127:
		raise EncodingError(f"Program {program} outside 0-127")

	tempo = timeline.tempo_bpm
	beats_per_bar, beat_unit = timeline.time_signature

	# (tick, priority, order, message)
	events: typing.List[typing.Tuple[int, int, int, typing.Union[mido.Message, mido.MetaMessage]]] = []

	def add (tick: int, priority: int, message: typing.Union[mido.Message, mido.MetaMessage]) -> None:
		events.append((tick, priority, len(events), message))

	add(0, _PRIORITY_SETUP, mido.MetaMessage("set_tempo", tempo=tempo_to_microseconds(tempo)))
	add(0, _PRIORITY_SETUP, mido.MetaMessage(
		"time_signature",
		numerator=beats_per_bar,
		denominator=beat_unit,
		clocks_per_click=24,
		notated_32nd_notes_per_beat=8,
	))
	add(0, _PRIORITY_SETUP, mido.Message("program_change", channel=channel, program=program))

	for note in timeline.notes:

		if note.is_rest:
			continue

		on_tick, off_tick = _note_span(note.start_seconds, note.duration_seconds, tempo)
		add(on_tick, _PRIORITY_NOTE_ON, mido.Message("note_on", channel=channel, note=note.pitch, velocity=midi_velocity(note.velocity)))
		add(off_tick, _PRIORITY_NOTE_OFF, mido.Message("note_off", channel=channel, note=note.pitch, velocity=0))

	if chord_channel is not None:

		bar_seconds = timeline.bar_duration_seconds
		chord_velocity = midi_velocity(cantus.constants.velocity.CHORD_VELOCITY)

		for chord in timeline.chords:
			on_tick, off_tick = _note_span(chord.bar_index * bar_seconds, bar_seconds, tempo)

			for pitch in _chord_voicing(chord):
				add(on_tick, _PRIORITY_NOTE_ON, mido.Message("note_on", channel=chord_channel, note=pitch, velocity=chord_velocity))
				add(off_tick, _PRIORITY_NOTE_OFF, mido.Message("note_off", channel=chord_channel, note=pitch, velocity=0))

	events.sort(key=lambda event: event[:3])

	end_tick = max(events[-1][0], seconds_to_ticks(timeline.total_duration_seconds, tempo))

	stream = bytearray()
	last_tick = 0

	for tick, _, _, message in events:
		stream += encode_vlq(tick - last_tick)
		stream += bytes(message.bytes())
		last_tick = tick

	stream += encode_vlq(end_tick - last_tick)
	stream += bytes(mido.MetaMessage("end_of_track").bytes())

	return bytes(stream)


def encode_timeline (
	timeline: cantus.timeline.SongTimeline,
	program: int = 0,
	channel: int = 0,
	chord_channel: typing.Optional[int] = None,
) -> bytes:

	"""Encode a timeline as a complete format 0 Standard MIDI File.

	Parameters:
		timeline: The song to encode.
		program: General MIDI program for the melody channel (0 = piano).
		channel: MIDI channel for the melody (0–15).
		chord_channel: If set, one sustained triad per bar is added on this
		               channel, in the same track.

	Returns:
		The file contents. Identical timelines always give identical bytes.

	Raises:
		EncodingError: The timeline holds a note that cannot be encoded.
	"""

	track = encode_track_events(timeline, program=program, channel=channel, chord_channel=chord_channel)

	header = cantus.constants.midi.HEADER_MAGIC + struct.pack(
		">IHHH",
		cantus.constants.midi.HEADER_LENGTH,
		cantus.constants.midi.FORMAT_SINGLE_TRACK,
		1,
		PPQ,
	)

	return header + cantus.constants.midi.TRACK_MAGIC + struct.pack(">I", len(track)) + track


def read_chunks (data: bytes) -> typing.List[typing.Tuple[bytes, bytes]]:

	"""Split SMF bytes into ``(magic, payload)`` chunks, checking every length."""

	chunks: typing.List[typing.Tuple[bytes, bytes]] = []
	offset = 0

	while offset < len(data):

		if offset + 8 > len(data):
			raise ValueError(f"Truncated chunk header at byte {offset}")

		magic = data[offset:offset + 4]
		(length,) = struct.unpack(">I", data[offset + 4:offset + 8])
		payload = data[offset + 8:offset + 8 + length]

		if len(payload) != length:
			raise ValueError(f"Chunk {magic!r} declares {length} bytes but only {len(payload)} remain")

		chunks.append((magic, payload))
		offset += 8 + length

	return chunks


def write_midi_file (
	path: typing.Union[str, pathlib.Path],
	timeline: cantus.timeline.SongTimeline,
	**kwargs: typing.Any,
) -> int:

	"""Encode a timeline and write it to ``path``; return the byte count."""

	data = encode_timeline(timeline, **kwargs)

	logger.info(f"Writing MIDI file ({len(data)} bytes, {len(timeline.audible_notes)} notes) to {path}")

	pathlib.Path(path).write_bytes(data)

	return len(data)
