from .resume_scorer import ScoringRules, load_scoring_rules, score_resume
from .text_coercion import coerce_json, extract_json_array
from .topic_gate import TopicDecision, TopicPolicy, Verdict, classify, load_topic_policy

__all__ = [
    "ScoringRules",
    "load_scoring_rules",
    "score_resume",
    "coerce_json",
    "extract_json_array",
    "TopicDecision",
    "TopicPolicy",
    "Verdict",
    "classify",
    "load_topic_policy",
]
