from sms_agent.conversation.escalation import EscalationAdvisor, EscalationDecision
from sms_agent.conversation.reply_filter import ReplyFilter
from sms_agent.conversation.sentiment import Sentiment, SentimentClassifier
from sms_agent.conversation.session_store import SessionStore
from sms_agent.conversation.sweeper import SessionSweeper

__all__ = [
    "SessionStore",
    "SessionSweeper",
    "EscalationAdvisor",
    "EscalationDecision",
    "SentimentClassifier",
    "Sentiment",
    "ReplyFilter",
]
