from sms_agent.agents.support_agent import ReplyOutcome, SupportAgent, build_support_agent

__all__ = ["SupportAgent", "ReplyOutcome", "build_support_agent"]
