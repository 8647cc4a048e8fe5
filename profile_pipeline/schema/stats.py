"""
Derived statistics attached to a NormalizedProfile.

These are read directly by directory/listing features, so they are always
recomputed from the full profile rather than patched incrementally.
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional


@dataclass
class ConversationStats:
    """Statistics about the conversations in a profile's matches."""
    number_of_conversations: int = 0
    number_of_conversations_with_messages: int = 0
    number_of_ghostings: int = 0
    number_of_one_message_conversations: int = 0
    percentage_of_one_message_conversations: int = 0
    max_message_count: int = 0
    average_message_count: float = 0.0
    median_message_count: float = 0.0
    longest_conversation_days: int = 0
    message_count_in_longest_conversation: int = 0
    longest_conversation_days_two_week_max: int = 0
    message_count_in_two_week_max_conversation: int = 0
    average_conversation_days: float = 0.0
    median_conversation_days: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number_of_conversations": int(self.number_of_conversations),
            "number_of_conversations_with_messages": int(self.number_of_conversations_with_messages),
            "number_of_ghostings": int(self.number_of_ghostings),
            "number_of_one_message_conversations": int(self.number_of_one_message_conversations),
            "percentage_of_one_message_conversations": int(self.percentage_of_one_message_conversations),
            "max_message_count": int(self.max_message_count),
            "average_message_count": float(self.average_message_count),
            "median_message_count": float(self.median_message_count),
            "longest_conversation_days": int(self.longest_conversation_days),
            "message_count_in_longest_conversation": int(self.message_count_in_longest_conversation),
            "longest_conversation_days_two_week_max": int(self.longest_conversation_days_two_week_max),
            "message_count_in_two_week_max_conversation": int(self.message_count_in_two_week_max_conversation),
            "average_conversation_days": float(self.average_conversation_days),
            "median_conversation_days": float(self.median_conversation_days)
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ConversationStats":
        return cls(**d)


@dataclass
class DerivedStats:
    """
    Aggregate metrics derived from a NormalizedProfile.

    Attributes:
        matches_total: Number of distinct match records
        swipe_likes_total: Sum of daily right swipes
        swipe_passes_total: Sum of daily left swipes
        match_rate: matches_total / swipe_likes_total (0.0 without likes)
        days_in_period: Number of distinct dates in usage
        app_opens_total: Sum of daily app opens
        super_likes_total: Sum of daily super likes
        messages_sent_total: Sum of daily messages sent
        messages_received_total: Sum of daily messages received
        like_ratio: Likes / (likes + passes) (0.0 without swipes)
        first_day_on_app: Earliest usage date
        last_day_on_app: Latest usage date
        conversations: Conversation statistics over the match records
    """
    matches_total: int = 0
    swipe_likes_total: int = 0
    swipe_passes_total: int = 0
    match_rate: float = 0.0
    days_in_period: int = 0
    app_opens_total: int = 0
    super_likes_total: int = 0
    messages_sent_total: int = 0
    messages_received_total: int = 0
    like_ratio: float = 0.0
    first_day_on_app: Optional[str] = None
    last_day_on_app: Optional[str] = None
    conversations: ConversationStats = field(default_factory=ConversationStats)

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["conversations"] = self.conversations.to_dict()
        return result

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DerivedStats":
        d = dict(d)
        d["conversations"] = ConversationStats.from_dict(d.get("conversations") or {})
        return cls(**d)

    def summary(self) -> str:
        """Generate text summary of the statistics."""
        lines = [
            "Profile Statistics",
            "=" * 50,
            f"  Period: {self.first_day_on_app or 'N/A'} -> {self.last_day_on_app or 'N/A'}",
            f"  Days with usage: {self.days_in_period}",
            f"  Matches: {self.matches_total}",
            f"  Likes: {self.swipe_likes_total}",
            f"  Passes: {self.swipe_passes_total}",
            f"  Match rate: {self.match_rate:.4f}",
            f"  Like ratio: {self.like_ratio:.4f}",
            f"  Messages sent: {self.messages_sent_total}",
            f"  Conversations with messages: {self.conversations.number_of_conversations_with_messages}",
        ]
        return "\n".join(lines)
