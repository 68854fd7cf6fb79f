import io
import typing

import mido
import pytest

import cantus.config
import cantus.harmony
import cantus.intervals
import cantus.rng
import cantus.timeline


SAMPLE_LYRICS = """\
walking down the river road
singing to the morning light
every step a little song

hold on hold on
never let it go
"""


def decode_midi (data: bytes) -> mido.MidiFile:

	"""Parse encoded bytes with mido, independently of the encoder."""

	return mido.MidiFile(file=io.BytesIO(data))


def make_timeline (
	notes: typing.Sequence[cantus.timeline.NoteEvent],
	tempo_bpm: float = 120.0,
	time_signature: typing.Tuple[int, int] = (4, 4),
	total_bars: int = 1,
) -> cantus.timeline.SongTimeline:

	"""Assemble a timeline by hand, bypassing the generator."""

	scale = cantus.intervals.build_scale("C", "major")
	progression = cantus.harmony.Progression(scale, [1, 5, 6, 4])
	total_duration = notes[-1].end_seconds if notes else 0.0

	return cantus.timeline.SongTimeline(
		tempo_bpm=tempo_bpm,
		time_signature=time_signature,
		key=scale,
		vocal_range=(55, 69),
		sections=(cantus.timeline.Section(name="verse", label="A", start_bar=0, bar_count=total_bars),),
		chords=tuple(progression.events(total_bars)),
		notes=tuple(notes),
		total_bars=total_bars,
		total_duration_seconds=total_duration,
	)


@pytest.fixture
def sample_lyrics () -> str:

	"""Two blocks of plain English lyrics."""

	return SAMPLE_LYRICS


@pytest.fixture
def rng () -> cantus.rng.SeededRandom:

	"""A fresh seeded generator for each test."""

	return cantus.rng.SeededRandom(12345)


@pytest.fixture
def c_major () -> cantus.intervals.ScaleSpec:

	"""The C major scale."""

	return cantus.intervals.build_scale("C", "major")


@pytest.fixture
def default_config () -> cantus.config.SongConfig:

	"""Default generation parameters."""

	return cantus.config.SongConfig()
