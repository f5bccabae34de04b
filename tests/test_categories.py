"""
Tests for the Category Scorer — weighted heuristic signals.
"""

import pytest
from jobshield.categories import (
    POSITIVE_INDICATORS,
    SHORT_TEXT_REASON,
    CategoryScorer,
    category_scorer,
)

# Neutral padding that matches no category and names no company
PAD = (
    " we are looking for motivated people to join our customer support "
    "team in the coming weeks."
)


class TestSingleCategories:
    def test_unrealistic_salary(self):
        result = category_scorer.score("work from home and earn $10000 every month." + PAD)
        assert result.score == 25
        assert result.reasons == ('Unrealistic salary promises: "earn $10000"',)
        assert "unrealistic_salary" in result.triggered_categories

    def test_suspicious_contact_cites_first_declared_phrase(self):
        result = category_scorer.score("contact via whatsapp for details." + PAD)
        assert result.score == 20
        assert result.reasons == ("Suspicious contact method: whatsapp",)

    def test_personal_email(self):
        result = category_scorer.score("send your cv to hr.jobs@gmail.com today." + PAD)
        assert result.score == 15
        assert result.reasons == ("Uses personal email domain: @gmail.com",)


class TestVagueCompany:
    def test_vague_without_company_name(self):
        text = (
            "we are a leading company in the logistics sector and we are hiring "
            "warehouse staff for our new site across the region."
        )
        result = category_scorer.score(text)
        assert result.score == 10
        assert result.reasons == ("Vague company description without specific name",)

    def test_vague_with_company_name(self):
        text = (
            "Acme Logistics is a leading company in the logistics sector and we are "
            "hiring warehouse staff for our new site across the region."
        )
        result = category_scorer.score(text)
        assert result.score == 0
        assert "vague_company" not in result.triggered_categories

    def test_generic_words_are_not_company_names(self):
        assert category_scorer.has_specific_company_name(
            "Position open. Candidate wanted. Role details follow."
        ) is False

    def test_short_capitalized_words_are_ignored(self):
        assert category_scorer.has_specific_company_name("Job at IBM now") is False

    def test_capitalized_name_counts(self):
        assert category_scorer.has_specific_company_name("join Globex Corporation") is True


class TestThresholdCategories:
    """Urgency and too-good-to-be-true need three or more phrases."""

    def test_two_urgency_phrases_do_not_trigger(self):
        result = category_scorer.score("apply now and hurry." + PAD)
        assert result.score == 0
        assert len(result.matches["urgency_tactics"]) == 2

    def test_three_urgency_phrases_trigger(self):
        result = category_scorer.score("apply now, hurry, limited slots." + PAD)
        assert result.score == 10
        assert result.reasons == ("Uses excessive urgency tactics",)

    def test_too_good_to_be_true(self):
        result = category_scorer.score(
            "no experience required, anyone can apply, flexible timing." + PAD
        )
        assert result.score == 10
        assert result.reasons == ("Makes unrealistic promises about job requirements",)


class TestBrevityAndPositives:
    def test_short_text(self):
        result = category_scorer.score("hiring now.")
        assert result.score == 5
        assert result.reasons == (SHORT_TEXT_REASON,)

    def test_length_uses_trimmed_text(self):
        result = category_scorer.score("   hiring now.   " + " " * 200)
        assert SHORT_TEXT_REASON in result.reasons

    def test_clean_text_gets_positive_indicators(self):
        result = category_scorer.score(
            "Globex Corporation is hiring a data analyst to join the finance team. "
            "Requirements: SQL, Python and three years of reporting experience."
        )
        assert result.score == 0
        assert result.reasons == POSITIVE_INDICATORS

    def test_positive_indicators_never_add_points(self):
        result = category_scorer.score("")
        assert result.score == 5  # short text only
        assert POSITIVE_INDICATORS[0] not in result.reasons


class TestAccumulation:
    def test_reasons_follow_catalog_order(self):
        result = category_scorer.score(
            "message us on telegram. earn lakhs from home! mail jobs@yahoo.com." + PAD
        )
        assert result.score == 25 + 20 + 15
        assert [r.split(":")[0] for r in result.reasons] == [
            "Unrealistic salary promises",
            "Suspicious contact method",
            "Uses personal email domain",
        ]

    def test_every_category_sums(self):
        text = (
            "earn $10000 fast cash via whatsapp or telegram, mail boss@gmail.com. "
            "leading company. apply now, hurry, limited slots, act fast. "
            "no experience required, anyone can apply, flexible timing, guaranteed selection."
        )
        result = CategoryScorer().score(text)
        assert result.score == 90
        assert 0 <= result.score <= 100

    @pytest.mark.parametrize("text", ["", "a", "x" * 10_000])
    def test_score_in_range(self, text):
        assert 0 <= category_scorer.score(text).score <= 100
