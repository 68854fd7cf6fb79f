"""Command-line entry point: ``python -m cantus lyrics.txt -o song.mid``.

Parameters come from an optional YAML config file and are overridden by
command-line flags::

    # song.yaml
    seed: 7
    tempoBPM: 96
    timeSignature: "3/4"
    keyTonic: G
    keyMode: major
    complexity: 0.6
    style: ballad
    structure: "A A B A"
"""

import argparse
import json
import logging
import os
import sys
import typing

import yaml

import cantus.composition
import cantus.config
import cantus.harmony
import cantus.midi_file


logger = logging.getLogger(__name__)


# Command-line flag name → SongConfig field name.
FLAG_FIELDS: typing.Dict[str, str] = {
	"seed": "seed",
	"tempo": "tempo_bpm",
	"time_signature": "time_signature",
	"key": "key_tonic",
	"mode": "key_mode",
	"complexity": "complexity",
	"vocal_center": "vocal_center",
	"vocal_range": "vocal_range_semitones",
	"style": "style",
	"structure": "structure",
}


def load_config (config_path: typing.Optional[str]) -> dict:

	"""
	Load generation parameters from a YAML file.
	"""

	if not config_path:
		return {}

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		values = yaml.safe_load(f)

	if values is None:
		return {}

	if not isinstance(values, dict):
		logger.warning(f"Config file {config_path} does not hold a mapping. Using defaults.")
		return {}

	return values


def read_lyrics (path: str) -> str:

	"""Read lyric text from a file, or from stdin when the path is ``-``."""

	if path == "-":
		return sys.stdin.read()

	with open(path, 'r', encoding="utf-8") as f:
		return f.read()


def build_parser () -> argparse.ArgumentParser:

	"""Return the argument parser for the command line."""

	parser = argparse.ArgumentParser(prog="cantus", description="Generate a song from lyrics and write it as a MIDI file.")

	parser.add_argument("lyrics", help="Lyric text file, or '-' to read stdin")
	parser.add_argument("-o", "--output", default="song.mid", help="MIDI file to write (default: song.mid)")
	parser.add_argument("-c", "--config", help="YAML file with generation parameters")
	parser.add_argument("--seed", type=int)
	parser.add_argument("--tempo", type=float, help="Quarter notes per minute")
	parser.add_argument("--time-signature", help="e.g. 4/4, 3/4, 6/8")
	parser.add_argument("--key", help="Tonic note name, e.g. C, F#, Bb")
	parser.add_argument("--mode", help="major, minor, dorian, ...")
	parser.add_argument("--complexity", type=float, help="0.0 (plain) to 1.0 (busy)")
	parser.add_argument("--vocal-center", type=int, help="MIDI note at the middle of the vocal range")
	parser.add_argument("--vocal-range", type=int, help="Vocal range width in semitones")
	parser.add_argument("--style", help=f"Chord style: {', '.join(cantus.harmony.available_styles())}")
	parser.add_argument("--structure", help="Section labels, e.g. 'A A B A'")
	parser.add_argument("--program", type=int, default=0, help="General MIDI program for the melody")
	parser.add_argument("--chords", action="store_true", help="Add a chord accompaniment on channel 2")
	parser.add_argument("--json", metavar="PATH", help="Also write the timeline as JSON ('-' for stdout)")
	parser.add_argument("-v", "--verbose", action="store_true", help="Log pipeline detail")

	return parser


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the cantus command line.
	"""

	args = build_parser().parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

	values = load_config(args.config)

	for flag, field in FLAG_FIELDS.items():
		value = getattr(args, flag)
		if value is not None:
			values[field] = value

	config = cantus.config.SongConfig.from_dict(values)
	timeline = cantus.composition.generate_song(read_lyrics(args.lyrics), config)

	try:
		cantus.midi_file.write_midi_file(
			args.output,
			timeline,
			program=args.program,
			chord_channel=1 if args.chords else None,
		)
	except cantus.midi_file.EncodingError as e:
		logger.error(f"Could not encode song: {e}")
		return 1

	if args.json:
		text = json.dumps(timeline.to_dict(), indent=2, ensure_ascii=False)

		if args.json == "-":
			print(text)
		else:
			with open(args.json, 'w', encoding="utf-8") as f:
				f.write(text)

	return 0


if __name__ == "__main__":
	sys.exit(main())
