import io
import json

import pytest

import cantus.__main__
import cantus.midi_file

import conftest


@pytest.fixture
def lyrics_file (tmp_path, sample_lyrics: str):

	path = tmp_path / "lyrics.txt"
	path.write_text(sample_lyrics, encoding="utf-8")

	return path


def _tempo (path) -> int:

	track = conftest.decode_midi(path.read_bytes()).tracks[0]

	return next(msg.tempo for msg in track if msg.type == "set_tempo")


def test_writes_midi_file (tmp_path, lyrics_file) -> None:

	output = tmp_path / "song.mid"

	assert cantus.__main__.main([str(lyrics_file), "-o", str(output), "--seed", "3"]) == 0
	assert output.read_bytes()[:4] == b"MThd"
	assert _tempo(output) == 500000


def test_same_arguments_same_file (tmp_path, lyrics_file) -> None:

	first = tmp_path / "a.mid"
	second = tmp_path / "b.mid"

	cantus.__main__.main([str(lyrics_file), "-o", str(first), "--seed", "9", "--complexity", "0.9"])
	cantus.__main__.main([str(lyrics_file), "-o", str(second), "--seed", "9", "--complexity", "0.9"])

	assert first.read_bytes() == second.read_bytes()


def test_yaml_config_and_flag_override (tmp_path, lyrics_file) -> None:

	config = tmp_path / "song.yaml"
	config.write_text("tempoBPM: 90\ntimeSignature: \"3/4\"\nkeyTonic: G\n", encoding="utf-8")

	from_config = tmp_path / "config.mid"
	overridden = tmp_path / "override.mid"

	cantus.__main__.main([str(lyrics_file), "-o", str(from_config), "-c", str(config)])
	cantus.__main__.main([str(lyrics_file), "-o", str(overridden), "-c", str(config), "--tempo", "60"])

	assert _tempo(from_config) == 666667
	assert _tempo(overridden) == 1000000

	track = conftest.decode_midi(from_config.read_bytes()).tracks[0]
	assert next(msg.numerator for msg in track if msg.type == "time_signature") == 3


def test_json_export (tmp_path, lyrics_file) -> None:

	json_path = tmp_path / "song.json"

	cantus.__main__.main([str(lyrics_file), "-o", str(tmp_path / "song.mid"), "--json", str(json_path), "--structure", "A B"])

	data = json.loads(json_path.read_text(encoding="utf-8"))

	assert [section["name"] for section in data["sections"]] == ["verse", "chorus"]
	assert len(data["chords"]) == data["total_bars"]
	assert data["notes"][0]["lyric"] == "walking"


def test_json_to_stdout_and_lyrics_from_stdin (tmp_path, monkeypatch, capsys) -> None:

	monkeypatch.setattr("sys.stdin", io.StringIO("la la la"))

	assert cantus.__main__.main(["-", "-o", str(tmp_path / "song.mid"), "--json", "-"]) == 0

	data = json.loads(capsys.readouterr().out)
	assert [note["lyric"] for note in data["notes"]] == ["la", "la", "la"]


def test_chords_flag_adds_second_channel (tmp_path, lyrics_file) -> None:

	output = tmp_path / "song.mid"

	cantus.__main__.main([str(lyrics_file), "-o", str(output), "--chords"])

	track = conftest.decode_midi(output.read_bytes()).tracks[0]
	assert any(msg.type == "note_on" and msg.channel == 1 for msg in track)


def test_encoding_error_returns_failure (tmp_path, lyrics_file, monkeypatch) -> None:

	def refuse (*args, **kwargs):
		raise cantus.midi_file.EncodingError("note 0 is broken")

	monkeypatch.setattr(cantus.midi_file, "write_midi_file", refuse)

	assert cantus.__main__.main([str(lyrics_file), "-o", str(tmp_path / "song.mid")]) == 1


# ---------------------------------------------------------------------------
# load_config
# ---------------------------------------------------------------------------

def test_load_config_missing_file (tmp_path, caplog) -> None:

	with caplog.at_level("WARNING", logger="cantus.__main__"):
		assert cantus.__main__.load_config(str(tmp_path / "nope.yaml")) == {}

	assert "not found" in caplog.text


def test_load_config_empty_and_non_mapping (tmp_path) -> None:

	empty = tmp_path / "empty.yaml"
	empty.write_text("", encoding="utf-8")

	listing = tmp_path / "list.yaml"
	listing.write_text("- 1\n- 2\n", encoding="utf-8")

	assert cantus.__main__.load_config(None) == {}
	assert cantus.__main__.load_config(str(empty)) == {}
	assert cantus.__main__.load_config(str(listing)) == {}


def test_load_config_values (tmp_path) -> None:

	path = tmp_path / "song.yaml"
	path.write_text("seed: 7\nstyle: ballad\n", encoding="utf-8")

	assert cantus.__main__.load_config(str(path)) == {"seed": 7, "style": "ballad"}
