import unittest

from fusdle.guess import (
    MATCH_EXACT,
    MATCH_NONE,
    MATCH_WRONG_ORDER,
    WRONG_ORDER_FEEDBACK,
    evaluate_guess,
)


class EvaluateGuessTests(unittest.TestCase):
    def test_exact_answer(self):
        result = evaluate_guess("Housekeeping", "Housekeeping")
        self.assertTrue(result.is_correct)
        self.assertEqual(result.answer, "Housekeeping")

    def test_case_and_whitespace_are_ignored(self):
        self.assertTrue(evaluate_guess("Piggy Bank", "  piggy   BANK ").is_correct)
        self.assertTrue(evaluate_guess("Piggy Bank", "piggybank").is_correct)

    def test_right_words_wrong_order(self):
        result = evaluate_guess("Piggy Bank", "bank piggy")
        self.assertFalse(result.is_correct)
        self.assertIsNone(result.answer)
        self.assertEqual(result.match_type, MATCH_WRONG_ORDER)
        self.assertTrue(result.has_correct_words_wrong_order)
        self.assertEqual(result.partial_match_feedback, WRONG_ORDER_FEEDBACK)

    def test_single_word_match(self):
        result = evaluate_guess("Piggy Bank", "river bank")
        self.assertEqual(result.match_type, MATCH_EXACT)
        self.assertEqual(result.matched_word, "bank")
        self.assertEqual(
            result.partial_match_feedback,
            'You\'re on the right track! Your guess contains "bank".',
        )
        self.assertFalse(result.has_correct_words_wrong_order)

    def test_short_words_do_not_count(self):
        result = evaluate_guess("Lord of the Rings", "of")
        self.assertEqual(result.match_type, MATCH_NONE)
        self.assertIsNone(result.matched_word)

    def test_no_match(self):
        result = evaluate_guess("Housekeeping", "Gardening")
        self.assertFalse(result.is_correct)
        self.assertEqual(result.match_type, MATCH_NONE)
        self.assertIsNone(result.partial_match_feedback)

    def test_word_count_must_match_for_wrong_order(self):
        result = evaluate_guess("Piggy Bank", "bank piggy bank")
        self.assertEqual(result.match_type, MATCH_EXACT)
        self.assertEqual(result.matched_word, "bank")


if __name__ == "__main__":
    unittest.main()
