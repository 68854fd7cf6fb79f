"""Lyric tokenizer.

Raw lyric text is split into blocks (separated by blank lines), blocks into
lines, and lines into :class:`Token` units that each carry one sung note.

Two kinds of line are recognised:

- **Word-delimited** lines (Latin, Cyrillic, ... or anything with spaces
  between words) are split on whitespace and stripped of surrounding
  punctuation.
- **Character-grouped** lines (dense scripts written without spaces, such as
  Japanese or Chinese) are split one unit per character. Modifier
  characters - small kana, the prolonged sound mark, voicing marks and
  combining marks - are merged onto the unit before them, so ``"きょう"``
  becomes ``["きょ", "う"]`` rather than three tokens. Runs of
  non-dense letters inside such a line (``"Hello世界"``) stay one unit.

Empty input never fails: it yields a single placeholder token so later
stages always have something to work with.
"""

import dataclasses
import typing
import unicodedata


PLACEHOLDER_TEXT = ""

# Small kana, iteration/prolonged marks and standalone voicing marks.
MODIFIER_CHARACTERS: typing.FrozenSet[str] = frozenset(
	"ぁぃぅぇぉっゃゅょゎゕゖ"
	"ァィゥェォッャュョヮヵヶ"
	"ーゝゞヽヾ゛゜ﾞﾟ"
)

# Inclusive code point ranges for scripts written without inter-word spaces.
DENSE_SCRIPT_RANGES: typing.Tuple[typing.Tuple[int, int], ...] = (
	(0x0E00, 0x0E7F),   # Thai
	(0x3040, 0x309F),   # Hiragana
	(0x30A0, 0x30FF),   # Katakana
	(0x3400, 0x4DBF),   # CJK extension A
	(0x4E00, 0x9FFF),   # CJK unified ideographs
	(0xAC00, 0xD7AF),   # Hangul syllables
	(0xF900, 0xFAFF),   # CJK compatibility ideographs
	(0xFF66, 0xFF9F),   # Half-width katakana
)


@dataclasses.dataclass(frozen=True)
class Token:

	"""One lyric unit, sung on one note.

	Attributes:
		text: The syllable or word. Empty for the placeholder.
		placeholder: True only for the fallback token produced from empty input.
	"""

	text: str
	placeholder: bool = False


PLACEHOLDER_TOKEN = Token(text=PLACEHOLDER_TEXT, placeholder=True)


def is_dense_character (char: str) -> bool:

	"""Return True if the character belongs to a script written without spaces."""

	code = ord(char)

	return any(low <= code <= high for low, high in DENSE_SCRIPT_RANGES)


def is_modifier (char: str) -> bool:

	"""Return True for characters that only modify the unit before them."""

	return char in MODIFIER_CHARACTERS or unicodedata.combining(char) != 0


def _is_punctuation (char: str) -> bool:

	return unicodedata.category(char)[0] in ("P", "S")


def is_character_grouped (line: str) -> bool:

	"""Decide whether a line should be split per character.

	A line is character-grouped when it has no whitespace between its units
	and contains at least one dense-script character. Anything else (including
	a single Latin word) is word-delimited.
	"""

	stripped = line.strip()

	if not stripped or any(char.isspace() for char in stripped):
		return False

	return any(is_dense_character(char) for char in stripped)


def _strip_punctuation (word: str) -> str:

	start = 0
	end = len(word)

	while start < end and _is_punctuation(word[start]):
		start += 1

	while end > start and _is_punctuation(word[end - 1]):
		end -= 1

	return word[start:end]


def _split_words (line: str) -> typing.List[Token]:

	tokens: typing.List[Token] = []

	for word in line.split():
		text = _strip_punctuation(word)
		if text:
			tokens.append(Token(text=text))

	return tokens


def _split_characters (line: str) -> typing.List[Token]:

	units: typing.List[str] = []
	# A modifier with nothing before it waits for the next unit.
	pending = ""
	# True while the last unit is a run of non-dense letters (e.g. "baby" in "愛してるbaby").
	in_run = False

	for char in line.strip():

		if char.isspace() or (_is_punctuation(char) and not is_modifier(char)):
			in_run = False
			continue

		if is_modifier(char):
			if units:
				units[-1] += char
			else:
				pending += char
			continue

		dense = is_dense_character(char)

		if not dense and in_run:
			units[-1] += char
			continue

		units.append(pending + char)
		pending = ""
		in_run = not dense

	if pending:
		if units:
			units[-1] += pending
		else:
			units.append(pending)

	return [Token(text=unit) for unit in units]


def tokenize_line (line: str) -> typing.List[Token]:

	"""Split one lyric line into tokens.

	Example:
		```python
		[t.text for t in tokenize_line("Hello, world!")]  # ["Hello", "world"]
		[t.text for t in tokenize_line("きょうは")]         # ["きょ", "う", "は"]
		```
	"""

	if is_character_grouped(line):
		return _split_characters(line)

	return _split_words(line)


def split_blocks (text: str) -> typing.List[typing.List[str]]:

	"""Split raw text into blocks of non-blank lines.

	Blank lines separate blocks. Leading and trailing whitespace is stripped
	from every line.
	"""

	blocks: typing.List[typing.List[str]] = []
	current: typing.List[str] = []

	for raw_line in (text or "").splitlines():
		line = raw_line.strip()

		if not line:
			if current:
				blocks.append(current)
				current = []
			continue

		current.append(line)

	if current:
		blocks.append(current)

	return blocks


def tokenize_lyrics (text: str) -> typing.List[typing.List[typing.List[Token]]]:

	"""Tokenize a full lyric text into blocks → lines → tokens.

	Lines that yield no tokens (punctuation only) are skipped, as are blocks
	left empty by that. When nothing remains, the result is one block holding
	one line with the placeholder token.

	Example:
		```python
		tokenize_lyrics("la la\\n\\nhey")
		# [[[Token("la"), Token("la")]], [[Token("hey")]]]

		tokenize_lyrics("")
		# [[[Token("", placeholder=True)]]]
		```
	"""

	result: typing.List[typing.List[typing.List[Token]]] = []

	for block in split_blocks(text):
		lines = [tokens for tokens in (tokenize_line(line) for line in block) if tokens]
		if lines:
			result.append(lines)

	if not result:
		return [[[PLACEHOLDER_TOKEN]]]

	return result


def is_placeholder_lyrics (blocks: typing.List[typing.List[typing.List[Token]]]) -> bool:

	"""Return True if the tokenized lyrics are just the empty-input fallback."""

	return len(blocks) == 1 and len(blocks[0]) == 1 and blocks[0][0] == [PLACEHOLDER_TOKEN]
