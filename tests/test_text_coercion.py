import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.features.text_coercion import coerce_json, extract_json_array  # noqa: E402


class CoerceJsonTests(unittest.TestCase):
    def test_valid_json_is_returned_exactly(self):
        self.assertEqual(coerce_json('{"a": [1, 2], "b": null}'), {"a": [1, 2], "b": None})
        self.assertEqual(coerce_json("[1, \"two\"]"), [1, "two"])
        self.assertEqual(coerce_json("42"), 42)
        self.assertEqual(coerce_json('"just a string"'), "just a string")

    def test_object_is_extracted_from_surrounding_prose(self):
        text = 'Sure! Here is the analysis:\n```json\n{"skills": ["Python"], "rating_10": 7}\n```\nGood luck.'
        self.assertEqual(coerce_json(text), {"skills": ["Python"], "rating_10": 7})

    def test_array_is_extracted_when_no_object_parses(self):
        self.assertEqual(coerce_json('Here you go: ["Add X", "Add Y"]'), ["Add X", "Add Y"])

    def test_object_span_wins_over_array_span(self):
        text = 'prefix {"suggestions": ["a"]} suffix'
        self.assertEqual(coerce_json(text), {"suggestions": ["a"]})

    def test_greedy_object_span_that_does_not_parse_falls_through_to_array(self):
        text = 'first {broken} then ["ok"]'
        self.assertEqual(coerce_json(text), ["ok"])

    def test_unparseable_text_returns_raw_sentinel(self):
        self.assertEqual(coerce_json("no json here"), {"raw": "no json here"})
        self.assertEqual(coerce_json("a [broken] b"), {"raw": "a [broken] b"})

    def test_empty_and_non_string_inputs_never_raise(self):
        self.assertEqual(coerce_json(""), {"raw": ""})
        self.assertEqual(coerce_json(None), {"raw": None})
        self.assertEqual(coerce_json(123), {"raw": 123})

    def test_pathological_inputs_never_raise(self):
        for text in ["{", "}", "[", "]", "{]", "[}", "{" * 5000 + "}" * 5000, "[" * 2000, "{\"a\": NaN"]:
            coerce_json(text)


class ExtractJsonArrayTests(unittest.TestCase):
    def test_returns_array_span(self):
        self.assertEqual(extract_json_array('text ["a", "b"] text'), ["a", "b"])

    def test_returns_none_without_array(self):
        self.assertIsNone(extract_json_array('{"a": 1}'))
        self.assertIsNone(extract_json_array("[not json]"))
        self.assertIsNone(extract_json_array(None))


if __name__ == "__main__":
    unittest.main()
