from academy_chat.models.trial_session import TrialSession

__all__ = [
    "TrialSession",
]
