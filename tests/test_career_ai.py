import asyncio
import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

import httpx
import openai

PROJECT_ROOT = Path(__file__).resolve().parents[1]
TESTS_DIR = Path(__file__).resolve().parent
for path in (PROJECT_ROOT, TESTS_DIR):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from app.ai.errors import UpstreamErrorKind, classify_upstream_error  # noqa: E402
from app.features.resume_scorer import score_resume  # noqa: E402
from app.schemas.career import ChatTurn, ResumeAnalysisCore  # noqa: E402
from app.services.career_ai import (  # noqa: E402
    analyze_resume,
    chat_reply,
    load_career_ai_policy,
    onboarding_careers,
    suggest_improvements,
)
from fakes import FakeAIClient, network_error, quota_error  # noqa: E402

FALLBACK_SUGGESTIONS = [
    "Add a clear skills section listing technical skills and tools.",
    "Include 2-3 projects with bullet points describing what you built and technologies used.",
    "Add links to GitHub/portfolio and deployed demos.",
    "Write a 2-line summary at the top highlighting your strongest skills and goals.",
    "Quantify impact in project bullet points (numbers, metrics).",
]


def run(coro):
    return asyncio.run(coro)


class UpstreamErrorClassificationTests(unittest.TestCase):
    def test_quota_markers_are_case_sensitive_substrings(self):
        self.assertEqual(classify_upstream_error(quota_error()), UpstreamErrorKind.QUOTA)
        self.assertEqual(classify_upstream_error(RuntimeError("limit exceeded")), UpstreamErrorKind.QUOTA)
        self.assertEqual(classify_upstream_error(RuntimeError("QUOTA")), UpstreamErrorKind.TRANSIENT)
        self.assertEqual(classify_upstream_error(network_error()), UpstreamErrorKind.TRANSIENT)

    def test_sdk_rate_limit_error_is_quota(self):
        request = httpx.Request("POST", "https://example.invalid/v1/chat/completions")
        exc = openai.RateLimitError(
            "rate limited", response=httpx.Response(429, request=request), body=None
        )
        self.assertEqual(classify_upstream_error(exc), UpstreamErrorKind.QUOTA)

    def test_sdk_auth_error_is_auth(self):
        request = httpx.Request("POST", "https://example.invalid/v1/chat/completions")
        exc = openai.AuthenticationError(
            "bad key", response=httpx.Response(401, request=request), body=None
        )
        self.assertEqual(classify_upstream_error(exc), UpstreamErrorKind.AUTH)


class ChatReplyTests(unittest.TestCase):
    def setUp(self):
        self.policy = load_career_ai_policy()

    def test_success_returns_model_text_unmodified(self):
        client = FakeAIClient(reply="  Learn SQL first.\n")
        history = [ChatTurn(user_message="hi career", ai_response="hello")]
        reply = run(chat_reply("which skills for data science?", history, client=client))

        self.assertEqual(reply, "  Learn SQL first.\n")
        parts = client.calls[0]
        self.assertEqual(parts[0], self.policy.chat_system_prompt)
        self.assertEqual(parts[1], "User: hi career\nAssistant: hello")
        self.assertEqual(parts[-1], "User: which skills for data science?")

    def test_history_is_bounded(self):
        client = FakeAIClient(reply="ok")
        history = [ChatTurn(user_message=f"q{i}", ai_response=f"a{i}") for i in range(10)]
        run(chat_reply("career advice", history, client=client))

        parts = client.calls[0]
        self.assertEqual(len(parts), 1 + self.policy.max_history_turns + 1)
        self.assertEqual(parts[1], "User: q4\nAssistant: a4")

    def test_quota_failure_returns_quota_reply(self):
        reply = run(chat_reply("career advice", client=FakeAIClient(error=quota_error())))
        self.assertEqual(reply, self.policy.chat_quota_reply)
        self.assertIn("quota", reply)

    def test_generic_failure_returns_canned_advice_deterministically(self):
        first = run(chat_reply("career advice", client=FakeAIClient(error=network_error())))
        second = run(chat_reply("career advice", client=FakeAIClient(error=network_error())))
        self.assertEqual(first, self.policy.chat_fallback_reply)
        self.assertEqual(first, second)

    def test_missing_provider_credentials_fall_back(self):
        with patch(
            "app.services.career_ai.get_ai_client",
            side_effect=RuntimeError("GEMINI_API_KEY is missing"),
        ):
            reply = run(chat_reply("career advice"))
        self.assertEqual(reply, self.policy.chat_fallback_reply)


class AnalyzeResumeTests(unittest.TestCase):
    def test_well_formed_json_is_conformed(self):
        payload = {
            "skills": ["Python", " SQL ", 3, None, {"x": 1}],
            "missing_skills": "Docker, Kubernetes",
            "experience_level": "junior",
            "job_roles": ["Backend Developer"],
            "summary": "Solid junior profile.",
            "rating_10": 15,
            "extra": "ignored",
        }
        client = FakeAIClient(reply="```json\n" + json.dumps(payload) + "\n```")
        analysis = run(analyze_resume("resume text", client=client))

        self.assertIsInstance(analysis, ResumeAnalysisCore)
        self.assertEqual(analysis.skills, ["Python", "SQL", "3"])
        self.assertEqual(analysis.missing_skills, ["Docker", "Kubernetes"])
        self.assertEqual(analysis.experience_level, "junior")
        self.assertEqual(analysis.job_roles, ["Backend Developer"])
        self.assertEqual(analysis.summary, "Solid junior profile.")
        self.assertEqual(analysis.rating_10, 10)
        self.assertIn("resume text", client.calls[0][0])

    def test_prose_output_defaults_every_field(self):
        text = "I am sorry, but I cannot evaluate this resume. " * 20
        analysis = run(analyze_resume("resume", client=FakeAIClient(reply=text)))

        self.assertEqual(analysis.skills, [])
        self.assertEqual(analysis.missing_skills, [])
        self.assertEqual(analysis.experience_level, "unknown")
        self.assertEqual(analysis.job_roles, [])
        self.assertEqual(analysis.summary, text.strip()[:300])
        self.assertEqual(analysis.rating_10, 5)

    def test_off_contract_object_defaults_without_raw_summary(self):
        client = FakeAIClient(reply='{"verdict": "fine", "rating_10": 0}')
        analysis = run(analyze_resume("resume", client=client))
        self.assertEqual(analysis.summary, "")
        self.assertEqual(analysis.experience_level, "unknown")
        self.assertEqual(analysis.rating_10, 1)

    def test_quota_failure_returns_quota_flavoured_analysis(self):
        analysis = run(analyze_resume("python sql", client=FakeAIClient(error=quota_error())))
        self.assertEqual(analysis.skills, [])
        self.assertEqual(analysis.missing_skills, ["AI analysis unavailable due to quota limits"])
        self.assertEqual(analysis.rating_10, 5)

    def test_keyword_heuristic_on_generic_failure(self):
        text = "Summer intern. Python, SQL and Node backend work."
        analysis = run(analyze_resume(text, client=FakeAIClient(error=network_error())))
        self.assertEqual(analysis.skills, ["Node.js", "Python", "SQL"])
        self.assertEqual(analysis.missing_skills, ["Git", "Data Structures", "System Design"])
        self.assertEqual(analysis.experience_level, "intern")
        self.assertEqual(analysis.job_roles, ["Software Developer"])
        self.assertEqual(analysis.rating_10, 6)

    def test_heuristic_rating_is_clamped_to_one(self):
        analysis = run(analyze_resume("gardening", client=FakeAIClient(error=network_error())))
        self.assertEqual(analysis.skills, [])
        self.assertEqual(analysis.rating_10, 1)

    def test_fallback_scenario_then_score(self):
        resume_text = (
            "I built a javascript react project and pushed it to github. "
            + " ".join(["filler"] * 289)
        )
        self.assertEqual(len(resume_text.split()), 300)

        analysis = run(analyze_resume(resume_text, client=FakeAIClient(error=network_error())))
        self.assertEqual(analysis.skills, ["JavaScript", "React"])
        self.assertEqual(analysis.missing_skills, ["Git", "Data Structures", "System Design"])
        self.assertEqual(analysis.experience_level, "student")
        self.assertEqual(analysis.rating_10, 4)

        # 40 base + 30 skills (2/2 recognized) + 0 experience + 6 projects (project, github)
        self.assertEqual(score_resume(analysis, resume_text), 76)

    def test_fallback_is_deterministic(self):
        first = run(analyze_resume("react python", client=FakeAIClient(error=network_error())))
        second = run(analyze_resume("react python", client=FakeAIClient(error=network_error())))
        self.assertEqual(first.model_dump_json(), second.model_dump_json())


class SuggestImprovementsTests(unittest.TestCase):
    def test_direct_array(self):
        client = FakeAIClient(reply='["Add metrics", "Link GitHub"]')
        self.assertEqual(run(suggest_improvements("r", {}, client=client)), ["Add metrics", "Link GitHub"])

    def test_suggestions_key(self):
        client = FakeAIClient(reply='{"suggestions": ["Add metrics"]}')
        self.assertEqual(run(suggest_improvements("r", {}, client=client)), ["Add metrics"])

    def test_array_embedded_in_prose(self):
        client = FakeAIClient(reply='Here you go: ["Add X", "Add Y"]')
        self.assertEqual(run(suggest_improvements("r", {}, client=client)), ["Add X", "Add Y"])

    def test_array_beside_unrelated_object_is_re_extracted(self):
        client = FakeAIClient(reply='{"note": "see list"} ["Add X"]')
        self.assertEqual(run(suggest_improvements("r", {}, client=client)), ["Add X"])

    def test_analysis_is_sent_as_json(self):
        client = FakeAIClient(reply='["x"]')
        analysis = ResumeAnalysisCore(skills=["Python"], summary="s")
        run(suggest_improvements("resume body", analysis, client=client))
        prompt = client.calls[0][0]
        self.assertIn("resume body", prompt)
        self.assertIn('"skills": [\n    "Python"\n  ]', prompt)

    def test_unusable_output_returns_static_list(self):
        for reply in ["no list here", "[]", "[{}]", "{\"tips\": \"none\"}"]:
            result = run(suggest_improvements("r", {}, client=FakeAIClient(reply=reply)))
            self.assertEqual(result, FALLBACK_SUGGESTIONS, reply)

    def test_failure_returns_identical_static_list(self):
        first = run(suggest_improvements("r", {}, client=FakeAIClient(error=network_error())))
        second = run(suggest_improvements("r", {}, client=FakeAIClient(error=quota_error())))
        self.assertEqual(first, FALLBACK_SUGGESTIONS)
        self.assertEqual(first, second)
        first.append("mutated")
        third = run(suggest_improvements("r", {}, client=FakeAIClient(error=network_error())))
        self.assertEqual(third, FALLBACK_SUGGESTIONS)


class OnboardingCareersTests(unittest.TestCase):
    def test_careers_object(self):
        payload = {
            "careers": [
                {"title": "Data Engineer", "why": "Likes pipelines"},
                {"title": "Backend Developer", "why": "APIs"},
                {"title": "Cloud Engineer", "why": "Infra"},
                {"title": "Fourth", "why": "dropped"},
            ]
        }
        client = FakeAIClient(reply=json.dumps(payload))
        careers = run(onboarding_careers("data", "chess", "btech", client=client))
        self.assertEqual([c.title for c in careers], ["Data Engineer", "Backend Developer", "Cloud Engineer"])
        self.assertEqual(careers[0].why, "Likes pipelines")
        prompt = client.calls[0][0]
        self.assertIn("Interest: data", prompt)
        self.assertIn("Education: btech", prompt)

    def test_bare_string_array(self):
        client = FakeAIClient(reply='["Data Analyst", "QA Engineer", "DevOps Engineer"]')
        careers = run(onboarding_careers("data", "chess", "bsc", client=client))
        self.assertEqual([c.title for c in careers], ["Data Analyst", "QA Engineer", "DevOps Engineer"])
        self.assertTrue(all(c.why == "" for c in careers))

    def test_short_list_is_padded_to_three(self):
        client = FakeAIClient(reply='{"careers": [{"title": "Data Scientist", "why": "stats"}]}')
        careers = run(onboarding_careers("machine learning", "chess", "bsc", client=client))
        self.assertEqual([c.title for c in careers], ["Data Scientist", "AI / ML Engineer", "ML Research Intern"])

    def test_unusable_output_uses_heuristic(self):
        client = FakeAIClient(reply="I recommend following your passion.")
        careers = run(onboarding_careers("history", "reading", "ba", client=client))
        self.assertEqual(
            [c.title for c in careers],
            ["Software Developer", "Data Analyst", "Quality Assurance / Test Engineer"],
        )

    def test_machine_learning_interest_on_failure(self):
        careers = run(
            onboarding_careers("machine learning", "chess", "btech", client=FakeAIClient(error=network_error()))
        )
        self.assertEqual([c.title for c in careers], ["AI / ML Engineer", "Data Scientist", "ML Research Intern"])

    def test_design_hobby_on_failure(self):
        careers = run(onboarding_careers("history", "graphic design", "ba", client=FakeAIClient(error=quota_error())))
        self.assertEqual([c.title for c in careers], ["Frontend Developer", "UI/UX Designer", "Full Stack Developer"])

    def test_heuristic_is_deterministic_and_exactly_three(self):
        first = run(onboarding_careers("web", "music", "mca", client=FakeAIClient(error=network_error())))
        second = run(onboarding_careers("web", "music", "mca", client=FakeAIClient(error=network_error())))
        self.assertEqual(len(first), 3)
        self.assertEqual([c.model_dump() for c in first], [c.model_dump() for c in second])


if __name__ == "__main__":
    unittest.main()
