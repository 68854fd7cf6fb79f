"""
cantus - a deterministic procedural song generator for Python.

cantus turns raw lyric text and a handful of parameters into a fully-timed
song: a melody with one note per syllable, a chord per bar, and a section
map. The same lyrics, parameters and seed always give the same song, note
for note and byte for byte. The result can be written out as a Standard
MIDI File for any DAW, notation program or hardware sequencer.

What it does:

- **Tokenizes lyrics.** Word-delimited scripts split on spaces; dense
  scripts (Japanese, Chinese, Korean, Thai) split per character, keeping
  small kana and other modifiers attached to the syllable they belong to.
- **Seeded randomness.** A tiny xorshift32 generator, created fresh for
  every song, makes each decision reproducible across runs and platforms.
- **Rhythm on a grid.** Durations are drawn per syllable on a sixteenth
  grid, never crossing a bar line; ``complexity`` trades quarter notes for
  busier subdivisions and rests.
- **Melody by steps and leaps.** A walk over scale-snapped pitches inside a
  vocal range, with chord tones favoured on downbeats and optional grace
  notes at high complexity.
- **Harmony from templates.** Pop, ballad, rock, jazz, canon, blues and
  minor progressions, or a random walk over functional harmony.
- **Song form.** ``"A A B A"`` or ``"verse chorus verse"`` structures map
  lyric blocks onto bar-aligned sections.
- **Byte-exact MIDI.** A format 0 file with tempo, time signature, program
  and note events, written with variable-length delta times.

Minimal example:

    ```python
    import cantus

    config = cantus.SongConfig(seed=7, tempo_bpm=96, key_tonic="G", style="ballad")
    timeline = cantus.generate_song("la la la\\nhey hey", config)

    with open("song.mid", "wb") as f:
        f.write(cantus.encode_timeline(timeline))
    ```

Package-level exports: ``SongConfig``, ``SongTimeline``, ``generate_song``,
``encode_timeline``, ``EncodingError``.
"""

import cantus.composition
import cantus.config
import cantus.midi_file
import cantus.timeline


SongConfig = cantus.config.SongConfig
SongTimeline = cantus.timeline.SongTimeline
generate_song = cantus.composition.generate_song
encode_timeline = cantus.midi_file.encode_timeline
EncodingError = cantus.midi_file.EncodingError
