import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.topic_gate import TopicPolicy, Verdict, classify, load_topic_policy  # noqa: E402


class TopicGateTests(unittest.TestCase):
    def test_blocked_topic_wins_even_without_career_terms(self):
        decision = classify("what is a scholarship for college fees")
        self.assertEqual(decision.verdict, Verdict.BLOCKED_TOPIC)
        self.assertIn("scholarship", decision.message)

    def test_blocked_topic_wins_over_allow_list_hits(self):
        for message in [
            "Can I get a LOAN for my engineering degree?",
            "help with my java homework, I want a developer job",
            "which bank has the best internship",
        ]:
            self.assertEqual(classify(message).verdict, Verdict.BLOCKED_TOPIC, message)

    def test_known_misspelling_is_blocked(self):
        self.assertEqual(classify("any schollarchip for cse branch").verdict, Verdict.BLOCKED_TOPIC)

    def test_substring_matching_keeps_false_positives(self):
        decision = classify("feasibility vs feesibility of a career switch")
        self.assertEqual(decision.verdict, Verdict.BLOCKED_TOPIC)
        self.assertEqual(decision.matched, "fees")

    def test_message_without_career_terms_is_rejected(self):
        decision = classify("tell me a joke")
        self.assertEqual(decision.verdict, Verdict.NOT_CAREER_RELATED)
        self.assertIn("career-related", decision.message)

    def test_career_message_is_allowed(self):
        decision = classify("How do I prepare my Resume for a developer internship?")
        self.assertTrue(decision.allowed)
        self.assertIsNone(decision.message)

    def test_policy_can_be_substituted(self):
        policy = TopicPolicy(
            blocked_patterns=("crypto",),
            allowed_keywords=("career",),
            blocked_message="no crypto",
            off_topic_message="careers only",
        )
        self.assertEqual(classify("crypto career", policy).verdict, Verdict.BLOCKED_TOPIC)
        self.assertEqual(classify("scholarship career", policy).verdict, Verdict.ALLOWED)
        self.assertEqual(classify("hello", policy).message, "careers only")

    def test_loaded_policy_lists_are_lower_case(self):
        policy = load_topic_policy()
        self.assertIn("financial aid", policy.blocked_patterns)
        self.assertIn("b.tech", policy.allowed_keywords)
        self.assertTrue(all(p == p.lower() for p in policy.blocked_patterns + policy.allowed_keywords))


if __name__ == "__main__":
    unittest.main()
