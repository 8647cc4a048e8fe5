"""Data model for normalized dating profiles."""

from .profile import (
    NormalizedProfile,
    Identity,
    WorkInfo,
    UsageRecord,
    MatchRecord,
    MessageRecord,
    MediaItem,
    PromptEntry,
    Platform,
    Gender,
    MessageType,
    SENDER_USER,
    SENDER_MATCH,
    USAGE_COUNTERS,
)
from .consent import ConsentDeclaration, CONSENT_CATEGORIES
from .stats import DerivedStats, ConversationStats

__all__ = [
    "NormalizedProfile",
    "Identity",
    "WorkInfo",
    "UsageRecord",
    "MatchRecord",
    "MessageRecord",
    "MediaItem",
    "PromptEntry",
    "Platform",
    "Gender",
    "MessageType",
    "SENDER_USER",
    "SENDER_MATCH",
    "USAGE_COUNTERS",
    "ConsentDeclaration",
    "CONSENT_CATEGORIES",
    "DerivedStats",
    "ConversationStats",
]
