"""Tests for intent-focused prompt context."""

import json

from models.schemas.intent import IntentType
from models.schemas.resume import StructuredResume
from services.pipeline.context_builder import build_context, focused_sections, resume_snapshot


class TestFocusedSections:
    def test_skill_list(self, resume):
        assert focused_sections(IntentType.SKILL_LIST, resume) == {"skills": resume.skills}

    def test_experience(self, resume):
        sections = focused_sections(IntentType.EXPERIENCE_SUMMARY, resume)
        assert list(sections) == ["experience"]
        assert sections["experience"][0]["company"] == "Analytical Engines Ltd"

    def test_education_intents(self, resume):
        for intent in (IntentType.EDUCATION_INSTITUTION, IntentType.EDUCATION_DEGREE, IntentType.EDUCATION_YEAR):
            assert list(focused_sections(intent, resume)) == ["education"]

    def test_profile_links(self, resume):
        assert focused_sections(IntentType.GITHUB_URL, resume) == {"profile": {"github": "github.com/ada"}}
        assert focused_sections(IntentType.LINKEDIN_URL, resume) == {
            "profile": {"linkedin": "linkedin.com/in/ada"}
        }
        assert focused_sections(IntentType.PORTFOLIO_URL, resume) == {
            "profile": {"linkedin": "linkedin.com/in/ada"}
        }

    def test_motivation(self, resume):
        sections = focused_sections(IntentType.MOTIVATION, resume)
        assert set(sections) == {"experience_highlights", "skills"}

    def test_unmapped_intent(self, resume):
        assert focused_sections(IntentType.TEXT, resume) == {}


class TestBuildContext:
    def test_focused_context_excludes_other_sections(self, resume):
        context = json.loads(build_context(IntentType.EDUCATION_DEGREE, resume))
        assert "skills" not in context
        assert context["education"][0]["degree"] == "B.Sc. Mathematics"

    def test_pretty_printed(self, resume):
        assert "\n  " in build_context(IntentType.SKILL_LIST, resume)

    def test_unmapped_intent_uses_snapshot(self, resume):
        context = json.loads(build_context(IntentType.COVER_LETTER, resume))
        assert context["resume_snapshot"]["personal_info"]["name"] == "Ada Lovelace"

    def test_empty_focus_uses_snapshot(self):
        resume = StructuredResume(education=[{"degree": "BSc"}])
        context = json.loads(build_context(IntentType.SKILL_LIST, resume))
        assert list(context) == ["resume_snapshot"]
        assert context["resume_snapshot"]["education"][0]["degree"] == "BSc"

    def test_no_resume(self):
        assert build_context(IntentType.SKILL_LIST, None) == "{}"
        assert resume_snapshot(None) == "{}"

    def test_snapshot_is_full_resume(self, resume):
        assert StructuredResume.model_validate_json(resume_snapshot(resume)) == resume
