import unittest

import cantus.chords
import cantus.intervals


class ScaleBuilderTests (unittest.TestCase):

	"""
	Tests for scale construction and fallbacks.
	"""

	def test_major_members (self) -> None:

		"""
		C major should list its pitch classes upward from the tonic.
		"""

		scale = cantus.intervals.build_scale("C", "major")

		self.assertEqual(scale.members, (0, 2, 4, 5, 7, 9, 11))
		self.assertEqual(scale.name, "C major")


	def test_minor_members_start_on_tonic (self) -> None:

		"""
		A minor should start on A and wrap through C.
		"""

		scale = cantus.intervals.build_scale("A", "minor")

		self.assertEqual(scale.members, (9, 11, 0, 2, 4, 5, 7))


	def test_tonic_as_integer_and_case (self) -> None:

		"""
		Integer tonics wrap mod 12; names and modes are case-insensitive.
		"""

		scale = cantus.intervals.build_scale(14, "Major")

		self.assertEqual(scale.tonic_pc, 2)
		self.assertEqual(scale.mode, "major")
		self.assertEqual(cantus.intervals.build_scale("bb", "minor").tonic_pc, 10)


	def test_extra_modes (self) -> None:

		"""
		Church modes beyond major/minor are available.
		"""

		self.assertEqual(cantus.intervals.build_scale("D", "dorian").members, (2, 4, 5, 7, 9, 11, 0))


	def test_unknown_tonic_falls_back_to_c_major (self) -> None:

		"""
		An unknown tonic gives C major instead of raising.
		"""

		with self.assertLogs("cantus.intervals", level="WARNING"):
			scale = cantus.intervals.build_scale("H", "minor")

		self.assertEqual(scale.tonic_pc, 0)
		self.assertEqual(scale.mode, "major")


	def test_unknown_mode_falls_back_to_c_major (self) -> None:

		"""
		An unknown mode gives C major instead of raising.
		"""

		with self.assertLogs("cantus.intervals", level="WARNING"):
			scale = cantus.intervals.build_scale("E", "bebop")

		self.assertEqual(scale, cantus.intervals.build_scale("C", "major"))


	def test_scale_pitch_classes_unknown_mode_raises (self) -> None:

		"""
		The low-level helper is strict; only build_scale recovers.
		"""

		with self.assertRaises(ValueError):
			cantus.intervals.scale_pitch_classes(0, "bebop")


class NearestMemberTests (unittest.TestCase):

	"""
	Tests for scale snapping.
	"""

	def setUp (self) -> None:

		self.c_major = cantus.intervals.build_scale("C", "major")


	def test_in_scale_unchanged (self) -> None:

		for pitch in (60, 62, 64, 65, 67, 69, 71, 72):
			self.assertEqual(cantus.intervals.nearest_member(self.c_major, pitch), pitch)


	def test_ties_resolve_lower (self) -> None:

		"""
		Black keys in C major sit exactly between two members; the lower wins.
		"""

		self.assertEqual(cantus.intervals.nearest_member(self.c_major, 61), 60)
		self.assertEqual(cantus.intervals.nearest_member(self.c_major, 63), 62)
		self.assertEqual(cantus.intervals.nearest_member(self.c_major, 66), 65)
		self.assertEqual(cantus.intervals.nearest_member(self.c_major, 68), 67)
		self.assertEqual(cantus.intervals.nearest_member(self.c_major, 70), 69)


	def test_searches_octave_below (self) -> None:

		"""
		The nearest member may lie in the octave below the pitch.
		"""

		d_major = cantus.intervals.build_scale("D", "major")

		# C (60) is between B (59) and C# (61); the lower one is in the octave below.
		self.assertEqual(cantus.intervals.nearest_member(d_major, 60), 59)


	def test_searches_octave_above (self) -> None:

		"""
		The nearest member may lie in the octave above the pitch.
		"""

		only_c = cantus.intervals.ScaleSpec(tonic_pc=0, mode="custom", members=(0,))

		self.assertEqual(cantus.intervals.nearest_member(only_c, 71), 72)
		self.assertEqual(cantus.intervals.nearest_member(only_c, 65), 60)
		# Tritone away: equidistant from 60 and 72, lower wins.
		self.assertEqual(cantus.intervals.nearest_member(only_c, 66), 60)


	def test_result_always_in_scale (self) -> None:

		a_minor = cantus.intervals.build_scale("A", "minor")

		for pitch in range(0, 128):
			snapped = a_minor.nearest_member(pitch)
			self.assertTrue(a_minor.contains(snapped))
			self.assertLessEqual(abs(snapped - pitch), 1)


class ScaleStepTests (unittest.TestCase):

	"""
	Tests for moving by scale steps.
	"""

	def test_step_up_and_down (self) -> None:

		c_major = cantus.intervals.build_scale("C", "major")

		self.assertEqual(c_major.step(60, 2), 64)
		self.assertEqual(c_major.step(60, -2), 57)
		self.assertEqual(c_major.step(71, 1), 72)
		self.assertEqual(c_major.step(60, 7), 72)


	def test_step_in_minor (self) -> None:

		a_minor = cantus.intervals.build_scale("A", "minor")

		# C4 down three steps: B, A, G.
		self.assertEqual(a_minor.step(60, -3), 55)
		self.assertEqual(a_minor.step(57, 2), 60)


	def test_step_from_out_of_scale_raises (self) -> None:

		c_major = cantus.intervals.build_scale("C", "major")

		with self.assertRaises(ValueError):
			c_major.step(61, 1)


class ChordNameTests (unittest.TestCase):

	"""
	Tests for note name parsing and chord names.
	"""

	def test_parse_tonic (self) -> None:

		self.assertEqual(cantus.chords.parse_tonic("F#"), 6)
		self.assertEqual(cantus.chords.parse_tonic("bb"), 10)
		self.assertEqual(cantus.chords.parse_tonic(" e "), 4)
		self.assertEqual(cantus.chords.parse_tonic(-1), 11)
		self.assertIsNone(cantus.chords.parse_tonic("X"))
		self.assertIsNone(cantus.chords.parse_tonic(""))
		self.assertIsNone(cantus.chords.parse_tonic(None))
		self.assertIsNone(cantus.chords.parse_tonic(True))


	def test_chord_name (self) -> None:

		self.assertEqual(cantus.chords.Chord(root_pc=9, quality="minor").name(), "Am")
		self.assertEqual(cantus.chords.Chord(root_pc=7, quality="major").name(), "G")
