import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.analysis.keywords import extract_job_keywords, extract_keywords, tokenize  # noqa: E402
from app.analysis.rules import DEFAULT_RULES  # noqa: E402

SAMPLE_TEXT = (
    "We are hiring a Senior Backend Engineer to build and run our payments platform. "
    "You will own Python services, write SQL, and work with the team on AWS. "
    "The engineer will mentor others and improve the platform every quarter. I am, we are, it is."
)


class ExtractKeywordsTests(unittest.TestCase):
    def test_ranks_by_frequency(self):
        self.assertEqual(extract_keywords("Python python JAVA, java java sql"), ["java", "python", "sql"])

    def test_ties_keep_first_occurrence_order(self):
        self.assertEqual(extract_keywords("zeta alpha beta alpha zeta beta"), ["zeta", "alpha", "beta"])

    def test_keeps_language_symbols_and_drops_short_tokens(self):
        keywords = extract_keywords("Experience with C++, C#, Node.js and .NET.")
        self.assertIn("c++", keywords)
        self.assertIn("node.js", keywords)
        self.assertIn(".net", keywords)
        self.assertIn("experience", keywords)
        self.assertNotIn("c#", keywords)
        self.assertNotIn("with", keywords)

    def test_sentence_final_period_is_not_part_of_the_keyword(self):
        self.assertEqual(tokenize("Strong experience."), ["strong", "experience"])

    def test_output_has_no_duplicates_stop_words_or_short_tokens(self):
        keywords = extract_keywords(SAMPLE_TEXT)
        self.assertEqual(len(keywords), len(set(keywords)))
        for keyword in keywords:
            self.assertGreater(len(keyword), 2)
            self.assertNotIn(keyword, DEFAULT_RULES.stop_words)

    def test_reextracting_output_is_stable(self):
        keywords = extract_keywords(SAMPLE_TEXT)
        self.assertEqual(set(extract_keywords(" ".join(keywords))), set(keywords))

    def test_empty_text_yields_nothing(self):
        self.assertEqual(extract_keywords(""), [])
        self.assertEqual(extract_keywords("   \n\t"), [])


class ExtractJobKeywordsTests(unittest.TestCase):
    def test_pattern_terms_come_before_general_keywords(self):
        keywords = extract_job_keywords("Looking for a Python developer with SQL and AWS experience.")
        self.assertEqual(keywords, ["python", "sql", "aws", "looking", "developer", "experience"])

    def test_pattern_terms_follow_match_position(self):
        keywords = extract_job_keywords("We use JavaScript and Java daily")
        self.assertEqual(keywords[:2], ["javascript", "java"])

    def test_multi_word_and_separator_terms(self):
        keywords = extract_job_keywords("Experience in Machine Learning and problem-solving under CI/CD")
        self.assertIn("machine learning", keywords)
        self.assertIn("problem-solving", keywords)
        self.assertIn("ci/cd", keywords)

    def test_keywords_are_lowercase_and_unique(self):
        keywords = extract_job_keywords("AWS aws Aws KUBERNETES Docker LEADERSHIP " + SAMPLE_TEXT.upper())
        self.assertEqual(len(keywords), len(set(keywords)))
        for keyword in keywords:
            self.assertEqual(keyword, keyword.lower())

    def test_general_keywords_are_limited(self):
        job_description = " ".join(f"skill{index}" for index in range(40))
        keywords = extract_job_keywords(job_description)
        self.assertEqual(len(keywords), DEFAULT_RULES.general_keyword_limit)
        self.assertEqual(keywords[0], "skill0")
        self.assertNotIn("skill30", keywords)

    def test_empty_job_description(self):
        self.assertEqual(extract_job_keywords(""), [])


if __name__ == "__main__":
    unittest.main()
