"""
Tests for the Critical Detector — the override path.

A missed critical hit lets a fee-demanding scam through; a false hit
brands a legitimate posting as a scam. Both directions are tested.
"""

import pytest
from jobshield.catalog import CURRENCY, PAYMENT_DEMAND, PAYMENT_PHRASE
from jobshield.critical import (
    CONTEXT_RADIUS,
    CRITICAL_REASON,
    CriticalDetector,
    CriticalResult,
    critical_detector,
)


class TestPaymentPhrases:
    """Fee/payment nouns with a qualifying word."""

    def test_registration_fee(self):
        result = critical_detector.detect("Please pay a registration fee of $50 to proceed.")
        assert result.detected is True
        assert result.matches == ("registration fee",)
        assert result.spans[0].group == PAYMENT_PHRASE

    def test_security_deposit(self):
        result = critical_detector.detect(
            "Selected candidates will need a security deposit before the laptop ships."
        )
        assert "security deposit" in result.matches

    def test_case_insensitive_keeps_original_text(self):
        result = critical_detector.detect("A REGISTRATION FEE applies to every applicant.")
        assert result.detected is True
        assert result.matches[0] == "REGISTRATION FEE"

    def test_word_boundaries(self):
        result = critical_detector.detect(
            "Our preregistration feedback survey helps us improve interviews."
        )
        assert result.detected is False


class TestSafePhraseSuppression:
    """Safe phrases only suppress inside the match's context window."""

    def test_safe_phrase_in_window_suppresses(self):
        result = critical_detector.detect(
            "Registration process: there is a registration fee listed on the portal."
        )
        assert result.detected is False
        assert [s.match for s in result.suppressed] == ["registration fee"]

    def test_free_of_charge_suppresses(self):
        result = critical_detector.detect(
            "The training fee is covered by us, training is free of charge."
        )
        assert result.detected is False

    def test_safe_phrase_outside_window_does_not_suppress(self):
        text = (
            "There is no fee for interviews. Interviews are held at our office "
            "downtown every Tuesday and Thursday morning. A registration fee of 20 "
            "applies later."
        )
        result = critical_detector.detect(text)
        assert result.detected is True
        assert result.matches == ("registration fee",)

    def test_no_fee_required_is_not_a_demand(self):
        result = critical_detector.detect("Registration process opens Monday; no fee required.")
        assert result.detected is False


class TestPaymentDemands:
    """Demand phrasing is not subject to context-window suppression."""

    def test_must_pay(self):
        result = critical_detector.detect("You must pay before your first shift.")
        assert result.detected is True
        assert result.spans[0].group == PAYMENT_DEMAND

    def test_demand_ignores_safe_phrase_in_window(self):
        result = critical_detector.detect(
            "Registration process is simple, but you must pay before starting."
        )
        assert result.detected is True
        assert result.matches == ("must pay",)

    def test_payment_required(self):
        result = critical_detector.detect("Payment is required to unlock the job portal.")
        assert result.matches == ("Payment is required",)

    def test_benign_occurrence_does_not_hide_later_demand(self):
        result = critical_detector.detect(
            "No payment required to apply. After the interview, "
            "payment is required before your first shift."
        )
        assert result.detected is True
        assert result.matches == ("payment is required",)
        assert [s.match for s in result.suppressed] == ["payment required"]

    def test_every_occurrence_benign(self):
        result = critical_detector.detect(
            "No payment required. We repeat: no payment required, ever."
        )
        assert result.detected is False
        assert len(result.suppressed) == 2


class TestCurrencyRules:
    def test_amount_before_fee_word(self):
        result = critical_detector.detect("Send $99 registration to begin onboarding.")
        assert result.detected is True
        assert "$99 registration" in result.matches
        assert any(s.group == CURRENCY for s in result.spans)

    def test_fee_with_rupees(self):
        result = critical_detector.detect("Fee: Rs. 500 payable at the office.")
        assert result.detected is True

    def test_plain_salary_amount_is_not_critical(self):
        result = critical_detector.detect("Salary: $120,000 per year plus benefits.")
        assert result.detected is False

    def test_later_amount_after_benign_one(self):
        result = critical_detector.detect(
            "No fee: $0 to interview. Later a fee: $99 is collected."
        )
        assert result.detected is True
        assert result.matches == ("fee: $99",)
        assert result.spans[0].group == CURRENCY
        assert [s.match for s in result.suppressed] == ["fee: $0"]


class TestResultShape:
    def test_detected_mirrors_matches(self):
        clean = critical_detector.detect("We build accounting software for small firms.")
        assert clean.detected is False
        assert clean.matches == ()
        assert clean.reasons == []
        assert clean.critical_reason is None

    def test_matches_are_unique_and_ordered(self):
        result = critical_detector.detect(
            "A security deposit is needed. Deposit required before day one. "
            "You must pay it upfront, and you must pay it in cash."
        )
        assert len(result.matches) == len(set(result.matches))
        assert result.matches[0] == "security deposit"

    def test_span_context_window(self):
        filler = "x" * 200
        text = f"{filler} registration fee {filler}"
        result = critical_detector.detect(text)
        span = result.spans[0]
        assert span.start == 201
        assert span.end == 201 + len("registration fee")
        assert len(span.context) == len("registration fee") + 2 * CONTEXT_RADIUS
        assert text[span.start:span.end] == span.match

    def test_reasons_cite_first_match(self):
        result = critical_detector.detect("Pay the onboarding fee today.")
        assert result.reasons[0] == 'CRITICAL: Job requires payment or fees - "onboarding fee"'
        assert result.critical_reason == CRITICAL_REASON

    @pytest.mark.parametrize("text", ["", "   ", "\n\n"])
    def test_blank_text(self, text):
        assert critical_detector.detect(text).detected is False

    def test_empty_result_default(self):
        assert CriticalResult().detected is False

    def test_detector_is_stateless(self):
        detector = CriticalDetector()
        first = detector.detect("You must pay first.")
        detector.detect("Nothing to see here.")
        second = detector.detect("You must pay first.")
        assert first == second
