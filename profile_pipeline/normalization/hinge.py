"""
Hinge export -> NormalizedProfile.

Hinge exports only contain the user's own actions. Each entry in
``Matches`` is a conversation thread that may hold:
- ``like``: the user liked the other person
- ``match``: a mutual match happened
- ``block``: the user rejected (no match) or unmatched (after a match)
- ``chats``: messages the user sent
- ``voice_notes``: voice notes the user sent
- ``we_met``: the user's answer to the "did you meet?" follow-up

There are no daily counters in the export, so usage is derived from the
timestamps of these events.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..anonymization import derive_profile_id, hash_identifier
from ..aggregation.frames import events_to_usage
from ..errors import MalformedFieldError
from ..schema import (
    Identity,
    MatchRecord,
    MediaItem,
    MessageRecord,
    MessageType,
    NormalizedProfile,
    Platform,
    PromptEntry,
    SENDER_USER,
    WorkInfo,
)
from .fields import (
    get_mapping,
    map_hinge_gender,
    optional_list,
    parse_date,
    parse_json_array,
    parse_timestamp,
    require_list,
    to_optional_int,
    to_optional_text,
)
from .ordering import collapse_matches, sort_matches, sort_messages

logger = logging.getLogger(__name__)


def _first_entry(thread: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    entries = thread.get(key)
    if isinstance(entries, list) and entries and isinstance(entries[0], dict):
        return entries[0]
    return None


def _entries(thread: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    entries = thread.get(key)
    if not isinstance(entries, list):
        return []
    return [e for e in entries if isinstance(e, dict)]


def thread_events(thread: Dict[str, Any]) -> List[Tuple[Any, str]]:
    """
    Usage events of one thread as ``(timestamp, counter)`` pairs.

    A like counts as a right swipe, a block without a match as a left
    swipe, a match event as a match and each chat as a sent message.
    """
    events = []
    like = _first_entry(thread, "like")
    match = _first_entry(thread, "match")

    if like and like.get("timestamp"):
        events.append((like["timestamp"], "swipes_right"))
    if match and match.get("timestamp"):
        events.append((match["timestamp"], "matches"))
    if not match:
        for block in _entries(thread, "block"):
            if block.get("timestamp"):
                events.append((block["timestamp"], "swipes_left"))
    for chat in _entries(thread, "chats"):
        if chat.get("timestamp"):
            events.append((chat["timestamp"], "messages_sent"))
    return events


def thread_messages(thread: Dict[str, Any]) -> List[MessageRecord]:
    """
    Messages of a matched thread.

    A chat without a body is a voice note when a voice note shares its
    timestamp; otherwise it is skipped.
    """
    voice_notes = {}
    for note in _entries(thread, "voice_notes"):
        sent_at = parse_timestamp(note.get("timestamp"))
        if sent_at is not None:
            voice_notes[sent_at] = note.get("url") if isinstance(note.get("url"), str) else None

    messages = []
    for chat in _entries(thread, "chats"):
        sent_at = parse_timestamp(chat.get("timestamp"))
        if sent_at is None:
            continue

        body = chat.get("body") if isinstance(chat.get("body"), str) else ""
        if body:
            messages.append(MessageRecord(sender=SENDER_USER, sent_at=sent_at, content=body))
        elif sent_at in voice_notes:
            messages.append(MessageRecord(
                sender=SENDER_USER,
                sent_at=sent_at,
                message_type=MessageType.VOICE_NOTE,
                media_url=voice_notes[sent_at]
            ))
    return sort_messages(messages)


def normalize_threads(export: Dict[str, Any]) -> Tuple[List[MatchRecord], List[Tuple[Any, str]]]:
    """
    Convert ``Matches`` threads into match records and usage events.

    Hinge has no match identifier, so one is derived from the match time.
    Threads with the same match time are one match, within an export and
    across exports.

    Raises:
        MalformedFieldError: If ``Matches`` or one of its threads is mis-shaped
    """
    threads = require_list(export, "Matches", "Matches")
    matches = []
    events = []
    for i, thread in enumerate(threads):
        if not isinstance(thread, dict):
            raise MalformedFieldError(f"Matches[{i}]", f"expected an object, got {type(thread).__name__}")

        events.extend(thread_events(thread))

        match = _first_entry(thread, "match")
        if match is None:
            continue

        like = _first_entry(thread, "like")
        we_met = _first_entry(thread, "we_met")
        matched_at = parse_timestamp(match.get("timestamp"))
        matches.append(MatchRecord(
            match_id=hash_identifier(matched_at) if matched_at else None,
            order=i,
            matched_at=matched_at,
            liked_at=parse_timestamp(like.get("timestamp")) if like else None,
            we_met=to_optional_text(we_met.get("did_meet_subject")) if we_met else None,
            unmatched=bool(_entries(thread, "block")),
            messages=thread_messages(thread)
        ))

    unique = collapse_matches(matches)
    if len(unique) < len(matches):
        logger.warning(f"Collapsed {len(matches) - len(unique)} threads with the same match time")
    return sort_matches(unique), events


def normalize_prompts(export: Dict[str, Any]) -> List[PromptEntry]:
    prompts = []
    for entry in optional_list(export, "Prompts", "Prompts"):
        if not isinstance(entry, dict) or not isinstance(entry.get("prompt"), str):
            logger.warning("Skipping unreadable prompt entry")
            continue
        options = entry.get("options")
        prompts.append(PromptEntry(
            prompt=entry["prompt"],
            answer=entry.get("text") if isinstance(entry.get("text"), str) else "",
            prompt_type=entry.get("type") or "text",
            options=[str(o) for o in options] if isinstance(options, list) else [],
            created_at=parse_timestamp(entry.get("created"))
        ))
    return prompts


def normalize_media(export: Dict[str, Any]) -> List[MediaItem]:
    media = []
    for item in optional_list(export, "Media", "Media"):
        if not isinstance(item, dict) or not isinstance(item.get("url"), str):
            logger.warning("Skipping unreadable media entry")
            continue
        media.append(MediaItem(
            url=item["url"],
            media_type=item.get("type") or "photo",
            caption=to_optional_text(item.get("prompt"))
        ))
    return media


def normalize_hinge(export: Dict[str, Any]) -> NormalizedProfile:
    """
    Normalize a Hinge export.

    The profile key is derived from the profile age and the account
    signup time. The signup time is kept only as a date.

    Args:
        export: Unwrapped (and, for multi-file exports, assembled) Hinge export

    Returns:
        NormalizedProfile without ``meta``

    Raises:
        MalformedFieldError: If a structural field is mis-shaped or the
            account identity is missing
    """
    user = export.get("User")
    if not isinstance(user, dict):
        raise MalformedFieldError("User", "missing account section")

    profile_section = get_mapping(user, "profile")
    account = get_mapping(user, "account")
    preferences = get_mapping(user, "preferences")
    location = get_mapping(user, "location")

    age = to_optional_int(profile_section.get("age"))
    signup_time = account.get("signup_time")
    if age is None:
        raise MalformedFieldError("User.profile.age", "missing or unreadable")
    if not isinstance(signup_time, str) or not signup_time:
        raise MalformedFieldError("User.account.signup_time", "missing")

    profile_id = derive_profile_id(Platform.HINGE.value, f"{age}-{signup_time}")

    matches, events = normalize_threads(export)
    usage = events_to_usage(events)

    job_title = to_optional_text(profile_section.get("job_title"))
    workplaces = parse_json_array(profile_section.get("workplaces"))
    work = WorkInfo(
        job_title=job_title,
        job_title_displayed=bool(profile_section.get("job_title_displayed")) if job_title else False,
        workplaces=workplaces,
        workplaces_displayed=bool(profile_section.get("workplaces_displayed")) if workplaces else False
    )

    identity = Identity(
        age=age,
        gender=map_hinge_gender(profile_section.get("gender")),
        interested_in=map_hinge_gender(preferences.get("gender_preference")),
        city=to_optional_text(location.get("city")),
        region=to_optional_text(location.get("region")),
        country=to_optional_text(location.get("country")),
        account_created=parse_date(signup_time),
        age_filter_min=to_optional_int(preferences.get("age_min")),
        age_filter_max=to_optional_int(preferences.get("age_max")),
        education_level=to_optional_text(profile_section.get("education_attained")),
        schools=parse_json_array(profile_section.get("schools")),
        work=work
    )

    profile = NormalizedProfile(
        profile_id=profile_id,
        platform=Platform.HINGE,
        identity=identity,
        usage=usage,
        matches=matches,
        media=normalize_media(export),
        prompts=normalize_prompts(export)
    )
    logger.info(
        f"Normalized Hinge export: {len(profile.usage)} usage days, "
        f"{len(profile.matches)} matches, {len(profile.prompts)} prompts"
    )
    return profile
