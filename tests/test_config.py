import dataclasses
import math

import pytest

import cantus.config


def test_defaults (default_config: cantus.config.SongConfig) -> None:

	assert default_config.seed == 1
	assert default_config.tempo_bpm == 120.0
	assert default_config.time_signature == (4, 4)
	assert default_config.key_tonic == "C"
	assert default_config.key_mode == "major"
	assert default_config.style == "pop"
	assert default_config.structure == "A"
	assert default_config.vocal_range == (55, 69)
	assert default_config.scale.name == "C major"


@pytest.mark.parametrize("field, given, expected", [
	("tempo_bpm", 5, 20.0),
	("tempo_bpm", 1000, 300.0),
	("tempo_bpm", "fast", 120.0),
	("tempo_bpm", math.nan, 120.0),
	("complexity", -0.5, 0.0),
	("complexity", 3, 1.0),
	("vocal_center", 10, 36),
	("vocal_center", 200, 96),
	("vocal_range_semitones", 4, 12),
	("vocal_range_semitones", 80, 36),
])
def test_numeric_fields_are_clamped (field, given, expected) -> None:

	config = cantus.config.SongConfig(**{field: given})

	assert getattr(config, field) == expected


def test_seed_is_masked_to_32_bits () -> None:

	assert cantus.config.SongConfig(seed=2 ** 32 + 5).seed == 5
	assert cantus.config.SongConfig(seed=-1).seed == 0xFFFFFFFF
	assert cantus.config.SongConfig(seed="42").seed == 42


@pytest.mark.parametrize("value, expected", [
	("3/4", (3, 4)),
	("6/8", (6, 8)),
	((5, 4), (5, 4)),
	("7/5", (7, 4)),
	("40/4", (16, 4)),
	("0/4", (1, 4)),
	("waltz", (4, 4)),
	(None, (4, 4)),
])
def test_parse_time_signature (value, expected) -> None:

	assert cantus.config.parse_time_signature(value) == expected


def test_key_normalisation () -> None:

	config = cantus.config.SongConfig(key_tonic="f#", key_mode="Harmonic Minor")

	assert config.key_tonic == "F#"
	assert config.key_mode == "harmonic_minor"
	assert config.scale.tonic_pc == 6


def test_integer_tonic_becomes_name () -> None:

	assert cantus.config.SongConfig(key_tonic=14).key_tonic == "D"


def test_unknown_key_falls_back (caplog) -> None:

	with caplog.at_level("WARNING", logger="cantus.config"):
		config = cantus.config.SongConfig(key_tonic="H", key_mode="bebop")

	assert config.key_tonic == "C"
	assert config.key_mode == "major"
	assert "H" in caplog.text


def test_unknown_style_falls_back () -> None:

	assert cantus.config.SongConfig(style="polka").style == "pop"


def test_blank_structure_is_single_verse () -> None:

	assert cantus.config.SongConfig(structure="   ").structure == "A"


def test_vocal_range_from_center_and_width () -> None:

	config = cantus.config.SongConfig(vocal_center=60, vocal_range_semitones=24)

	assert config.vocal_range == (48, 72)


def test_from_dict_accepts_camel_case () -> None:

	config = cantus.config.SongConfig.from_dict({
		"seed": 7,
		"tempoBPM": 96,
		"timeSignature": "3/4",
		"keyTonic": "G",
		"keyMode": "minor",
		"vocalCenter": 67,
		"vocalRangeSemitones": 18,
		"complexity": 0.25,
	})

	assert config.seed == 7
	assert config.tempo_bpm == 96.0
	assert config.time_signature == (3, 4)
	assert config.scale.name == "G minor"
	assert config.vocal_range == (58, 76)
	assert config.complexity == 0.25


def test_from_dict_ignores_unknown_keys (caplog) -> None:

	with caplog.at_level("WARNING", logger="cantus.config"):
		config = cantus.config.SongConfig.from_dict({"tempo": 90, "swing": 0.5})

	assert config.tempo_bpm == 90.0
	assert "swing" in caplog.text


def test_from_dict_none_gives_defaults (default_config) -> None:

	assert cantus.config.SongConfig.from_dict(None) == default_config


def test_replace_revalidates (default_config) -> None:

	changed = default_config.replace(tempo_bpm=999, seed=3)

	assert changed.tempo_bpm == 300.0
	assert changed.seed == 3
	assert default_config.tempo_bpm == 120.0


def test_config_is_frozen (default_config) -> None:

	with pytest.raises(dataclasses.FrozenInstanceError):
		default_config.seed = 5
