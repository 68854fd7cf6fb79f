"""Song form: structure strings and lyric block selection.

A structure is a list of labels such as ``"A A B A"`` or
``"verse chorus verse chorus bridge chorus"``. Each label picks a lyric
block to sing and gives the section its name:

- Letters index blocks in order (A → first block, B → second, ...) and are
  named verse, chorus, bridge. A letter with no matching block reuses the
  first block.
- Numbers are 1-based block indexes, clamped to the blocks available.
- Section names map to blocks directly (verse/intro/outro → first,
  chorus → second, bridge → third), again falling back to the first block.
"""

import logging
import re
import string
import typing


logger = logging.getLogger(__name__)


LETTER_NAMES: typing.Dict[str, str] = {
	"A": "verse",
	"B": "chorus",
	"C": "bridge",
}

NAMED_BLOCKS: typing.Dict[str, int] = {
	"intro": 0,
	"verse": 0,
	"chorus": 1,
	"bridge": 2,
	"outro": 0,
}

DEFAULT_LABEL = "A"

_SEPARATORS = re.compile(r"[\s,\-|/]+")


def parse_structure (text: typing.Optional[str]) -> typing.List[str]:

	"""Split a structure string into labels.

	Whitespace, commas, hyphens, bars and slashes all separate labels. An
	empty structure is a single ``"A"``.

	Example:
		```python
		parse_structure("A A B A")       # ["A", "A", "B", "A"]
		parse_structure("verse-chorus")  # ["verse", "chorus"]
		parse_structure("")              # ["A"]
		```
	"""

	labels = [label for label in _SEPARATORS.split(text or "") if label]

	return labels or [DEFAULT_LABEL]


def resolve_label (label: str, block_count: int) -> typing.Tuple[str, int]:

	"""Return ``(section_name, block_index)`` for one structure label.

	Parameters:
		label: One label from :func:`parse_structure`.
		block_count: Number of lyric blocks available (at least 1).

	Example:
		```python
		resolve_label("B", 1)       # ("chorus", 0) - reuses the only block
		resolve_label("3", 2)       # ("block_2", 1) - clamped
		resolve_label("bridge", 3)  # ("bridge", 2)
		```
	"""

	count = max(1, block_count)

	if label.isdecimal():
		index = min(max(int(label), 1), count) - 1
		return f"block_{index + 1}", index

	lowered = label.lower()

	if lowered in NAMED_BLOCKS:
		index = NAMED_BLOCKS[lowered]
		return lowered, index if index < count else 0

	if len(label) == 1 and label.upper() in string.ascii_uppercase:
		letter = label.upper()
		index = string.ascii_uppercase.index(letter)
		name = LETTER_NAMES.get(letter, f"section_{letter.lower()}")
		return name, index if index < count else 0

	logger.warning(f"Unknown section label {label!r}, singing the first block")

	return lowered, 0
