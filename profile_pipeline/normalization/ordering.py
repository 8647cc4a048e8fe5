"""Canonical ordering and deduplication of match and message sequences."""

import dataclasses
from typing import Dict, List

from ..schema import MatchRecord, MessageRecord


def sort_messages(messages: List[MessageRecord]) -> List[MessageRecord]:
    """Messages ascending by send time; ties keep their input order."""
    return sorted(messages, key=lambda message: message.sent_at)


def sort_matches(matches: List[MatchRecord]) -> List[MatchRecord]:
    """
    Order matches by vendor order index.

    Matches without an index follow the indexed ones, in chronological
    order of their first message. Matches without messages come last.
    Ties keep their input order.
    """
    def key(item):
        position, match = item
        first = match.first_message_at
        return (
            match.order is None,
            match.order if match.order is not None else 0,
            first is None,
            first or "",
            position,
        )

    return [match for _, match in sorted(enumerate(matches), key=key)]


def merge_match(old: MatchRecord, new: MatchRecord) -> MatchRecord:
    """
    Combine two records of the same match.

    Messages are unioned by (sender, sent_at, content) and re-sorted by send
    time. All other fields come from ``new``.
    """
    messages = {}
    for message in old.messages + new.messages:
        messages[message.dedup_key()] = message
    return dataclasses.replace(new, messages=sort_messages(list(messages.values())))


def collapse_matches(matches: List[MatchRecord]) -> List[MatchRecord]:
    """
    Collapse records that share a vendor match id into one.

    The collapsed record takes the position and order of the first
    occurrence. Records without an id are kept as they are.
    """
    collapsed: List[MatchRecord] = []
    position_by_id: Dict[str, int] = {}

    for match in matches:
        if match.match_id is None:
            collapsed.append(match)
            continue
        position = position_by_id.get(match.match_id)
        if position is None:
            position_by_id[match.match_id] = len(collapsed)
            collapsed.append(match)
        else:
            first = collapsed[position]
            collapsed[position] = dataclasses.replace(merge_match(first, match), order=first.order)

    return collapsed
