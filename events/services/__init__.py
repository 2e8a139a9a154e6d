from .participants import ParticipantRegistry
from .teams import TeamManager
from .rewards import RewardLedger, Flat, Categorized, BudgetSnapshot, build_allocation
from .votes import SpecialRewardVoteManager
from .feedback import FeedbackCollector
from .setup import EventSetup

__all__ = [
    "ParticipantRegistry",
    "TeamManager",
    "RewardLedger",
    "Flat",
    "Categorized",
    "BudgetSnapshot",
    "build_allocation",
    "SpecialRewardVoteManager",
    "FeedbackCollector",
    "EventSetup",
]
