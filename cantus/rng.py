"""Seeded pseudo-random generator for reproducible song generation.

:class:`SeededRandom` is a tiny xorshift32 generator. Its whole state is one
32-bit unsigned integer, so the stream of values for a given seed is the
same on every platform and every run. The public methods mirror the subset
of :class:`random.Random` used by the generators (``random()``,
``uniform()``, ``choice()``) so calling code reads the same either way.

A generator is created per generation call and threaded explicitly through
every stage. Never share one between two songs.
"""

import typing

T = typing.TypeVar("T")

_MASK_32 = 0xFFFFFFFF
_DEFAULT_SEED = 1


class SeededRandom:

	"""Deterministic xorshift32 generator producing floats in [0, 1)."""

	def __init__ (self, seed: int = _DEFAULT_SEED) -> None:

		"""Initialise the generator state from a 32-bit seed.

		The seed is masked to 32 bits. Zero would lock xorshift into an
		all-zero stream, so it is coerced to 1.
		"""

		state = int(seed) & _MASK_32

		if state == 0:
			state = _DEFAULT_SEED

		self._state: int = state


	def _next_state (self) -> int:

		"""Advance the xorshift32 recurrence and return the new state."""

		x = self._state
		x ^= (x << 13) & _MASK_32
		x ^= x >> 17
		x ^= (x << 5) & _MASK_32
		self._state = x

		return x


	def random (self) -> float:

		"""Return the next float in [0, 1)."""

		return self._next_state() / 4294967296.0


	def uniform (self, a: float, b: float) -> float:

		"""Return a float between ``a`` and ``b``."""

		return a + (b - a) * self.random()


	def randint (self, a: int, b: int) -> int:

		"""Return an integer in the inclusive range [a, b]."""

		if b < a:
			raise ValueError(f"Empty range for randint: {a}, {b}")

		return a + int(self.random() * (b - a + 1))


	def chance (self, probability: float) -> bool:

		"""Return True with the given probability."""

		if probability <= 0.0:
			return False

		return self.random() < probability


	def choice (self, seq: typing.Sequence[T]) -> T:

		"""Pick one item uniformly from a non-empty sequence."""

		if not seq:
			raise ValueError("Cannot choose from an empty sequence")

		return seq[int(self.random() * len(seq))]


	def weighted_choice (self, options: typing.Sequence[typing.Tuple[T, float]]) -> T:

		"""Pick one item from a list of (value, weight) pairs.

		Weights are relative and need not sum to 1.0. Zero-weight options are
		never selected.

		Example:
			```python
			rng = SeededRandom(7)
			duration = rng.weighted_choice([(4, 0.6), (2, 0.3), (1, 0.1)])
			```
		"""

		if not options:
			raise ValueError("Options list cannot be empty")

		total = sum(weight for _, weight in options)

		if total <= 0:
			raise ValueError("Total weight must be positive")

		threshold = self.random() * total
		cumulative = 0.0

		for value, weight in options:
			if weight <= 0:
				continue
			cumulative += weight
			if threshold < cumulative:
				return value

		# Float accumulation can leave the threshold a hair above the total.
		for value, weight in reversed(options):
			if weight > 0:
				return value

		return options[-1][0]
