"""
Conversation statistics over a profile's match records.
"""

from typing import List, Tuple

import numpy as np
import pandas as pd

from ..schema import ConversationStats, MatchRecord

# A conversation with a pause this long (in days) or longer counts as revived
MAX_GAP_DAYS = 14


def conversation_span(match: MatchRecord) -> Tuple[int, int]:
    """
    Length of a conversation and its longest pause, in whole days.

    Returns:
        (days between first and last message, largest gap between
        consecutive messages); (0, 0) for an empty conversation
    """
    if not match.messages:
        return 0, 0
    sent = pd.Series(pd.to_datetime([m.sent_at for m in match.messages], utc=True)).sort_values()
    length = int((sent.iloc[-1] - sent.iloc[0]).days)
    max_gap = int(sent.diff().dt.days.max()) if len(sent) > 1 else 0
    return length, max_gap


def conversation_stats(matches: List[MatchRecord]) -> ConversationStats:
    """
    Compute conversation statistics.

    Matches without messages count as ghostings; they take part in the
    averages and medians with zero messages and zero days.

    Args:
        matches: Match records with their messages

    Returns:
        ConversationStats
    """
    stats = ConversationStats(number_of_conversations=len(matches))
    if not matches:
        return stats

    message_counts = np.array([len(m.messages) for m in matches])
    spans = [conversation_span(m) for m in matches]
    day_lengths = np.array([length for length, _ in spans])

    stats.number_of_ghostings = int((message_counts == 0).sum())
    stats.number_of_conversations_with_messages = len(matches) - stats.number_of_ghostings
    stats.number_of_one_message_conversations = int((message_counts == 1).sum())
    stats.percentage_of_one_message_conversations = int(
        np.floor(stats.number_of_one_message_conversations / len(matches) * 100 + 0.5)
    )
    stats.max_message_count = int(message_counts.max())
    stats.average_message_count = float(message_counts.mean())
    stats.median_message_count = float(np.median(message_counts))
    stats.average_conversation_days = float(day_lengths.mean())
    stats.median_conversation_days = float(np.median(day_lengths))

    for count, (length, max_gap) in zip(message_counts, spans):
        if count == 0:
            continue
        if length > stats.longest_conversation_days:
            stats.longest_conversation_days = length
            stats.message_count_in_longest_conversation = int(count)
        if max_gap < MAX_GAP_DAYS and length > stats.longest_conversation_days_two_week_max:
            stats.longest_conversation_days_two_week_max = length
            stats.message_count_in_two_week_max_conversation = int(count)

    return stats
