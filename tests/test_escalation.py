"""Tests for sentiment classification and escalation heuristics."""

import pytest

from sms_agent.conversation.escalation import EscalationAdvisor
from sms_agent.conversation.sentiment import Sentiment, SentimentClassifier
from tests.conftest import make_history


class TestSentimentClassifier:
    def setup_method(self):
        self.classifier = SentimentClassifier()

    def test_positive(self):
        assert self.classifier.classify("I love this service") == Sentiment.POSITIVE

    def test_negative(self):
        assert self.classifier.classify("This is terrible") == Sentiment.NEGATIVE

    def test_neutral_without_lexicon_words(self):
        assert self.classifier.classify("What time is it") == Sentiment.NEUTRAL

    def test_tie_is_neutral(self):
        assert self.classifier.classify("good but bad") == Sentiment.NEUTRAL

    def test_case_insensitive(self):
        assert self.classifier.classify("AWFUL and HORRIBLE") == Sentiment.NEGATIVE

    def test_counts_every_occurrence(self):
        assert self.classifier.classify("bad bad good") == Sentiment.NEGATIVE

    def test_punctuation_attached_token_not_matched(self):
        assert self.classifier.classify("terrible!") == Sentiment.NEUTRAL

    def test_empty_text(self):
        assert self.classifier.classify("") == Sentiment.NEUTRAL

    def test_custom_lexicon(self):
        classifier = SentimentClassifier(positive_words=["stoked"], negative_words=["meh"])
        assert classifier.classify("totally stoked") == Sentiment.POSITIVE
        assert classifier.classify("I love it") == Sentiment.NEUTRAL


class TestKeywordRule:
    def test_keyword_any_casing(self, advisor):
        assert advisor.should_escalate("I want a REFUND", []) is True

    def test_keyword_substring(self, advisor):
        assert advisor.should_escalate("I have a complaint about my order", []) is True

    def test_multi_word_keyword(self, advisor):
        assert advisor.should_escalate("Can I talk to human please", []) is True

    def test_reason_reports_keyword(self, advisor):
        decision = advisor.evaluate("Please cancel my order", [])
        assert decision.escalate is True
        assert decision.reason == "keyword"
        assert decision.detail == "cancel"

    def test_custom_keywords(self):
        advisor = EscalationAdvisor(keywords=["lawyer"])
        assert advisor.should_escalate("Calling my LAWYER", []) is True
        assert advisor.should_escalate("I want a refund", []) is False


class TestLengthRule:
    def test_long_history_escalates_with_neutral_content(self, advisor):
        history = make_history([("customer", "ok"), ("assistant", "ok")] * 5)
        assert len(history) == 10
        decision = advisor.evaluate("thanks", history)
        assert decision.escalate is True
        assert decision.reason == "conversation_length"

    def test_just_under_threshold(self, advisor):
        history = make_history([("customer", "ok"), ("assistant", "ok")] * 4 + [("customer", "ok")])
        assert advisor.should_escalate("thanks", history) is False

    def test_custom_threshold(self):
        advisor = EscalationAdvisor(keywords=[], length_threshold=2)
        history = make_history([("customer", "hi"), ("assistant", "hello")])
        assert advisor.should_escalate("thanks", history) is True


class TestSentimentRule:
    def test_two_negative_recent_customer_messages(self, advisor):
        history = make_history([
            ("customer", "this is terrible"),
            ("customer", "so frustrated"),
            ("assistant", "Sorry to hear that"),
        ])
        decision = advisor.evaluate("ok", history)
        assert decision.escalate is True
        assert decision.reason == "negative_sentiment"

    def test_one_negative_is_not_enough(self, advisor):
        history = make_history([
            ("customer", "this is terrible"),
            ("assistant", "Sorry to hear that"),
        ])
        assert advisor.should_escalate("ok", history) is False

    def test_only_last_three_entries_considered(self, advisor):
        history = make_history([
            ("customer", "this is terrible"),
            ("customer", "awful experience"),
            ("assistant", "Sorry"),
            ("customer", "ok"),
            ("assistant", "Anything else?"),
        ])
        assert advisor.should_escalate("no", history) is False

    def test_negative_assistant_messages_ignored(self, advisor):
        history = make_history([
            ("assistant", "that is bad"),
            ("assistant", "really bad"),
            ("customer", "ok"),
        ])
        assert advisor.should_escalate("fine", history) is False


class TestNoEscalation:
    def test_short_neutral_message(self, advisor):
        history = make_history([("customer", "hi"), ("assistant", "Hello!")])
        decision = advisor.evaluate("What sizes do you have?", history)
        assert decision.escalate is False
        assert decision.reason is None

    def test_pure_and_deterministic(self, advisor):
        history = make_history([("customer", "this is terrible"), ("assistant", "Sorry")])
        snapshot = list(history)
        results = {advisor.should_escalate("hello", history) for _ in range(3)}
        assert results == {False}
        assert history == snapshot

    @pytest.mark.parametrize("message", ["Hello, how are you", "Do you ship to Canada?"])
    def test_plain_questions(self, advisor, message):
        assert advisor.should_escalate(message, []) is False
