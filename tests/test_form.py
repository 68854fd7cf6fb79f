import pytest

import cantus.form


# ---------------------------------------------------------------------------
# parse_structure
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("text, labels", [
	("A A B A", ["A", "A", "B", "A"]),
	("A,B, C", ["A", "B", "C"]),
	("verse-chorus|bridge/chorus", ["verse", "chorus", "bridge", "chorus"]),
	("  1 2  ", ["1", "2"]),
	("", ["A"]),
	("  ", ["A"]),
	(None, ["A"]),
])
def test_parse_structure (text, labels) -> None:

	assert cantus.form.parse_structure(text) == labels


# ---------------------------------------------------------------------------
# resolve_label
# ---------------------------------------------------------------------------

def test_letters_index_blocks () -> None:

	assert cantus.form.resolve_label("A", 3) == ("verse", 0)
	assert cantus.form.resolve_label("B", 3) == ("chorus", 1)
	assert cantus.form.resolve_label("c", 3) == ("bridge", 2)


def test_missing_letter_reuses_first_block () -> None:

	assert cantus.form.resolve_label("B", 1) == ("chorus", 0)
	assert cantus.form.resolve_label("D", 2) == ("section_d", 0)


def test_numbers_are_one_based_and_clamped () -> None:

	assert cantus.form.resolve_label("1", 3) == ("block_1", 0)
	assert cantus.form.resolve_label("2", 3) == ("block_2", 1)
	assert cantus.form.resolve_label("9", 2) == ("block_2", 1)
	assert cantus.form.resolve_label("0", 2) == ("block_1", 0)


def test_named_sections () -> None:

	assert cantus.form.resolve_label("Chorus", 2) == ("chorus", 1)
	assert cantus.form.resolve_label("bridge", 2) == ("bridge", 0)
	assert cantus.form.resolve_label("outro", 4) == ("outro", 0)


def test_unknown_label_warns (caplog) -> None:

	with caplog.at_level("WARNING", logger="cantus.form"):
		assert cantus.form.resolve_label("hook?", 3) == ("hook?", 0)

	assert "hook?" in caplog.text


def test_zero_blocks_treated_as_one () -> None:

	assert cantus.form.resolve_label("C", 0) == ("bridge", 0)


def test_non_ascii_digit_labels_do_not_raise (caplog) -> None:

	"""Superscripts look like digits but are not numbers; they fall back to the first block."""

	with caplog.at_level("WARNING", logger="cantus.form"):
		assert cantus.form.resolve_label("²", 3) == ("²", 0)

	assert "²" in caplog.text
