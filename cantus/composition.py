"""Section composer: lyrics + config → :class:`~cantus.timeline.SongTimeline`.

:func:`generate_song` is the single entry point of the generator. It creates
one :class:`~cantus.rng.SeededRandom` for the call and threads it through
every stage, in a fixed order:

1. the chord progression (only the ``"random"`` style draws from the RNG);
2. for each section of the structure, for each line of its lyric block: the
   line's rhythm, then its melody.

Time is tracked as an integer cursor in sub-beats (sixteenths) and only
converted to seconds when note entries are created, so bar arithmetic is
exact. Lines are separated by a one-beat breath. Every section starts on a
bar line; between sections the cursor moves on by at least two beats
(more than a breath) and then up to the next bar line.

Example:
	```python
	import cantus.composition
	import cantus.config

	config = cantus.config.SongConfig(seed=42, structure="A B A", style="ballad")
	timeline = cantus.composition.generate_song("la la la\\n\\nooh ooh", config)

	for note in timeline.audible_notes:
		print(note.start_seconds, note.pitch, note.lyric)
	```
"""

import logging
import typing

import cantus.config
import cantus.form
import cantus.harmony
import cantus.lyrics
import cantus.melodic_state
import cantus.rhythm
import cantus.rng
import cantus.timeline


logger = logging.getLogger(__name__)


# Silence between lines of one section, in beats.
BREATH_BEATS = 1

# Silence before the next section, in beats, before rounding up to the bar line.
# Must exceed BREATH_BEATS.
SECTION_GAP_BEATS = BREATH_BEATS + 1


def _ceil_to_bar (position: int, bar_length: int) -> int:

	return -(-position // bar_length) * bar_length


def generate_song (lyrics: str, config: typing.Optional[cantus.config.SongConfig] = None) -> cantus.timeline.SongTimeline:

	"""Generate a complete song timeline from lyric text.

	Parameters:
		lyrics: Raw lyric text. Blank lines separate blocks (verse, chorus, ...).
		config: Generation parameters; defaults to ``SongConfig()``.

	Returns:
		An immutable timeline. The same lyrics and config always give an
		identical timeline.
	"""

	if config is None:
		config = cantus.config.SongConfig()

	rng = cantus.rng.SeededRandom(config.seed)
	scale = config.scale
	low, high = config.vocal_range
	time_signature = config.time_signature

	bar_length = cantus.rhythm.sub_beats_per_bar(time_signature)
	beat_length = cantus.rhythm.sub_beats_per_beat(time_signature)

	blocks = cantus.lyrics.tokenize_lyrics(lyrics)
	labels = cantus.form.parse_structure(config.structure)

	if cantus.lyrics.is_placeholder_lyrics(blocks):
		logger.warning("No singable lyrics, generating an empty song")

	logger.info(
		f"Generating song: {len(blocks)} block(s), structure {labels}, {scale.name}, "
		f"{time_signature[0]}/{time_signature[1]} at {config.tempo_bpm} BPM, seed {config.seed}"
	)

	progression = cantus.harmony.generate_progression(scale, config.style, rng)
	state = cantus.melodic_state.MelodicState(scale, low, high, complexity=config.complexity)
	builder = cantus.timeline.TimelineBuilder(config.tempo_bpm, time_signature, scale, (low, high))

	cursor = 0

	for section_number, label in enumerate(labels):

		name, block_index = cantus.form.resolve_label(label, len(blocks))
		start_bar = cursor // bar_length

		for line_number, tokens in enumerate(blocks[block_index]):

			if line_number:
				cursor += BREATH_BEATS * beat_length

			steps = cantus.rhythm.generate_rhythm(
				len(tokens),
				time_signature,
				config.complexity,
				rng,
				bar_offset=cursor % bar_length,
			)

			notes = cantus.melodic_state.generate_melody(
				steps,
				tokens,
				state,
				rng,
				start_sub_beat=cursor,
				tempo_bpm=config.tempo_bpm,
				time_signature=time_signature,
				progression=progression,
			)

			builder.add_notes(notes)
			cursor += sum(step.duration for step in steps)

		is_last = section_number == len(labels) - 1
		gap = 0 if is_last else SECTION_GAP_BEATS * beat_length
		end_bar = max(start_bar + 1, _ceil_to_bar(cursor + gap, bar_length) // bar_length)

		builder.add_section(cantus.timeline.Section(
			name=name,
			label=label,
			start_bar=start_bar,
			bar_count=end_bar - start_bar,
			block_index=block_index,
		))

		logger.debug(f"Section {label!r} ({name}) bars {start_bar}-{end_bar - 1}, block {block_index}")

		cursor = end_bar * bar_length

	timeline = builder.build(progression.events(builder.next_bar))

	logger.info(
		f"Generated {len(timeline.audible_notes)} notes over {timeline.total_bars} bars "
		f"({timeline.total_duration_seconds:.2f}s)"
	)

	return timeline
