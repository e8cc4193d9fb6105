"""Tests for post-processing of model answers."""

import pytest

from models.responses import ModelAnswer
from models.schemas.intent import IntentType
from models.schemas.resume import StructuredResume
from services.pipeline.output_guard import (
    guard,
    looks_like_skill_dump,
    normalize_url,
    skill_dump_threshold,
)


def _answer(value, confidence=0.8, reasoning="from resume", field_matched="experience") -> ModelAnswer:
    return ModelAnswer(
        suggested_value=value, confidence=confidence, reasoning=reasoning, field_matched=field_matched
    )


class TestNormalizeUrl:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("github.com/ada", "https://github.com/ada"),
            ("  linkedin.com/in/ada ", "https://linkedin.com/in/ada"),
            ("http://ada.dev", "http://ada.dev"),
            ("https://ada.dev", "https://ada.dev"),
            ("", ""),
        ],
    )
    def test_scheme(self, raw, expected):
        assert normalize_url(raw) == expected


class TestSkillDump:
    def test_threshold(self):
        assert skill_dump_threshold(2) == 3
        assert skill_dump_threshold(6) == 3
        assert skill_dump_threshold(10) == 5

    def test_dump_detected(self, resume):
        assert looks_like_skill_dump("Python, SQL, Docker and Kubernetes", resume)

    def test_case_insensitive(self, resume):
        assert looks_like_skill_dump("python sql docker", resume)

    def test_two_mentions_allowed(self, resume):
        assert not looks_like_skill_dump("I enjoy building Python and SQL tools", resume)

    def test_no_skills(self):
        assert not looks_like_skill_dump("Python, SQL, Docker", StructuredResume())
        assert not looks_like_skill_dump("Python, SQL, Docker", None)


class TestGuard:
    def test_null_answer(self, resume):
        resolved = guard(IntentType.TEXT, None, resume)
        assert resolved.suggested_value == ""
        assert resolved.confidence == 0.0
        assert resolved.reasoning == "Model returned null response"
        assert resolved.matched_source == "llm_error"

    def test_empty_marker(self, resume):
        resolved = guard(IntentType.COVER_LETTER, _answer(" empty ", reasoning="", field_matched=None), resume)
        assert resolved.suggested_value == ""
        assert resolved.confidence == 0.1
        assert resolved.reasoning == "Model indicated no relevant data"
        assert resolved.matched_source == "no_data"

    def test_empty_marker_keeps_model_reasoning(self, resume):
        resolved = guard(IntentType.TEXT, _answer("EMPTY", reasoning="Nothing relevant", field_matched="none"), resume)
        assert resolved.reasoning == "Nothing relevant"
        assert resolved.matched_source == "none"

    def test_skill_dump_discarded_for_motivation(self, resume):
        resolved = guard(IntentType.MOTIVATION, _answer("I know Python, SQL, Docker and React"), resume)
        assert resolved.suggested_value == ""
        assert resolved.confidence == 0.0
        assert resolved.reasoning == "Discarded AI output that did not match intent"
        assert resolved.matched_source == "intent_guard"

    def test_skill_dump_allowed_for_skill_list(self, resume):
        resolved = guard(IntentType.SKILL_LIST, _answer("Python, SQL, Docker, React"), resume)
        assert resolved.suggested_value == "Python, SQL, Docker, React"

    def test_url_normalized(self, resume):
        resolved = guard(IntentType.LINKEDIN_URL, _answer("linkedin.com/in/ada", 0.9), resume)
        assert resolved.suggested_value == "https://linkedin.com/in/ada"
        assert resolved.confidence == 0.9

    def test_non_url_not_normalized(self, resume):
        resolved = guard(IntentType.TEXT, _answer("github.com/ada"), resume)
        assert resolved.suggested_value == "github.com/ada"

    def test_answer_passed_through_trimmed(self, resume):
        resolved = guard(IntentType.EXPERIENCE_SUMMARY, _answer("  Analyst at Engines  ", 0.7), resume)
        assert resolved.suggested_value == "Analyst at Engines"
        assert resolved.confidence == 0.7
        assert resolved.reasoning == "from resume"
        assert resolved.matched_source == "experience"

    def test_missing_value(self, resume):
        resolved = guard(IntentType.GITHUB_URL, ModelAnswer(), resume)
        assert resolved.suggested_value == ""
        assert resolved.matched_source is None
