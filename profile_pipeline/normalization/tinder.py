"""
Tinder export -> NormalizedProfile.

Tinder exports carry:
- ``User``: account and profile settings (birth date, gender, city, jobs, ...)
- ``Usage``: one ``{date: count}`` map per daily counter
- ``Messages``: one entry per match, newest match first
- ``Photos``: a list of URLs (legacy) or of photo objects (2025+)
"""

import dataclasses
import logging
from typing import Any, Dict, List, Optional

from ..anonymization import derive_profile_id
from ..aggregation.frames import counter_maps_to_usage
from ..errors import MalformedFieldError
from ..schema import (
    Identity,
    MatchRecord,
    MediaItem,
    MessageRecord,
    MessageType,
    NormalizedProfile,
    Platform,
    SENDER_MATCH,
    SENDER_USER,
    UsageRecord,
    WorkInfo,
)
from .fields import (
    age_on,
    get_mapping,
    map_tinder_gender,
    optional_list,
    parse_date,
    parse_timestamp,
    require_list,
    to_optional_int,
    to_optional_text,
)
from .ordering import collapse_matches, sort_matches, sort_messages

logger = logging.getLogger(__name__)

# Tinder usage key -> usage counter
USAGE_FIELDS = {
    "app_opens": "app_opens",
    "swipes_likes": "swipes_right",
    "swipes_passes": "swipes_left",
    "superlikes": "super_likes",
    "matches": "matches",
    "messages_sent": "messages_sent",
    "messages_received": "messages_received",
}

MESSAGE_TYPES = {
    "gif": MessageType.GIF,
    "gesture": MessageType.GESTURE,
    "contact_card": MessageType.CONTACT_CARD,
    "activity": MessageType.ACTIVITY,
    "1": MessageType.TEXT,
    1: MessageType.TEXT,
}


def message_type(raw_type: Any) -> MessageType:
    """Map a Tinder message ``type`` to MessageType."""
    if raw_type is None or raw_type == "":
        return MessageType.TEXT
    if not isinstance(raw_type, (str, int)):
        return MessageType.OTHER
    return MESSAGE_TYPES.get(raw_type, MessageType.OTHER)


def normalize_usage(usage_section: Any) -> List[UsageRecord]:
    """
    Convert the ``Usage`` section into daily records.

    Raises:
        MalformedFieldError: If the section or one of its counter maps is
            not an object
    """
    if not isinstance(usage_section, dict):
        raise MalformedFieldError("Usage", f"expected an object, got {type(usage_section).__name__}")

    counter_maps: Dict[str, Dict[str, Any]] = {}
    for vendor_key, counter in USAGE_FIELDS.items():
        values = usage_section.get(vendor_key)
        if values is None:
            continue
        if not isinstance(values, dict):
            raise MalformedFieldError(f"Usage.{vendor_key}", "expected a {date: count} object")
        counter_maps[counter] = values

    return counter_maps_to_usage(counter_maps)


def normalize_message(raw: Any) -> Optional[MessageRecord]:
    """Convert one message; returns None for messages without a send date."""
    if not isinstance(raw, dict):
        return None
    sent_at = parse_timestamp(raw.get("sent_date"))
    if sent_at is None:
        return None

    sender = SENDER_USER if raw.get("from", "You") in ("You", "you") else SENDER_MATCH
    content = to_optional_text(raw.get("message"), decode_entities=True) or ""
    media_url = raw.get("fixed_height") if isinstance(raw.get("fixed_height"), str) else None
    return MessageRecord(
        sender=sender,
        sent_at=sent_at,
        content=content,
        message_type=message_type(raw.get("type")),
        media_url=media_url
    )


def normalize_matches(export: Dict[str, Any]) -> List[MatchRecord]:
    """
    Convert ``Messages`` into match records.

    Tinder lists the newest match first; the order index counts from the
    oldest match. Entries that repeat a match id are collapsed into the
    oldest one, with their messages unioned.

    Raises:
        MalformedFieldError: If ``Messages`` or one of its entries is mis-shaped
    """
    entries = require_list(export, "Messages", "Messages")
    matches = []
    for order, entry in enumerate(reversed(entries)):
        if not isinstance(entry, dict):
            raise MalformedFieldError(
                f"Messages[{len(entries) - 1 - order}]",
                f"expected an object, got {type(entry).__name__}"
            )

        raw_messages = require_list(entry, "messages", f"Messages[{len(entries) - 1 - order}].messages")
        messages = [m for m in (normalize_message(raw) for raw in raw_messages) if m is not None]
        dropped = len(raw_messages) - len(messages)
        if dropped:
            logger.debug(f"Dropped {dropped} messages without a send date")

        match_id = entry.get("match_id")
        matches.append(MatchRecord(
            match_id=str(match_id) if match_id not in (None, "") else None,
            order=order,
            messages=sort_messages(messages)
        ))

    unique = collapse_matches(matches)
    if len(unique) < len(matches):
        logger.warning(f"Collapsed {len(matches) - len(unique)} repeated match entries")
    return sort_matches([dataclasses.replace(match, order=i) for i, match in enumerate(unique)])


def normalize_photos(export: Dict[str, Any]) -> List[MediaItem]:
    """Convert ``Photos`` in either the URL-list or the object-list format."""
    media = []
    for item in optional_list(export, "Photos", "Photos"):
        if isinstance(item, str) and item:
            media.append(MediaItem(url=item))
        elif isinstance(item, dict) and isinstance(item.get("url"), str):
            media.append(MediaItem(
                url=item["url"],
                media_type=item.get("type") or "photo",
                caption=to_optional_text(item.get("prompt_text"), decode_entities=True),
                created_at=parse_timestamp(item.get("created_at"))
            ))
        else:
            logger.warning("Skipping unreadable photo entry")
    return media


def normalize_work(user: Dict[str, Any]) -> WorkInfo:
    """Job title and employer from the first ``jobs`` entry."""
    jobs = user.get("jobs")
    if not isinstance(jobs, list) or not jobs or not isinstance(jobs[0], dict):
        return WorkInfo()

    title = get_mapping(jobs[0], "title")
    company = get_mapping(jobs[0], "company")
    job_title = to_optional_text(title.get("name"), decode_entities=True)
    company_name = to_optional_text(company.get("name"), decode_entities=True)
    return WorkInfo(
        job_title=job_title,
        job_title_displayed=bool(title.get("displayed")) if job_title else False,
        workplaces=[company_name] if company_name else [],
        workplaces_displayed=bool(company.get("displayed")) if company_name else False
    )


def normalize_interests(user: Dict[str, Any]) -> List[str]:
    """Interest tags from ``user_interests`` or the older ``interests`` objects."""
    interests = user.get("user_interests")
    if isinstance(interests, list):
        return [i for i in interests if isinstance(i, str) and i]

    interests = user.get("interests")
    if isinstance(interests, list):
        names = [i.get("name") if isinstance(i, dict) else i for i in interests]
        return [n for n in names if isinstance(n, str) and n]
    return []


def normalize_schools(user: Dict[str, Any]) -> List[str]:
    schools = user.get("schools")
    if not isinstance(schools, list):
        return []
    names = [s.get("name") if isinstance(s, dict) else s for s in schools]
    return [n for n in names if isinstance(n, str) and n]


def normalize_tinder(export: Dict[str, Any]) -> NormalizedProfile:
    """
    Normalize a Tinder export.

    The profile key is derived from ``birth_date`` and ``create_date``.
    When ``create_date`` is absent it is inferred from the earliest
    app-open day. Neither value is kept in the result; age is computed
    at the last day of recorded usage.

    Args:
        export: Unwrapped Tinder export

    Returns:
        NormalizedProfile without ``meta``

    Raises:
        MalformedFieldError: If a structural field is mis-shaped or the
            account identity is missing
    """
    user = export.get("User")
    if not isinstance(user, dict):
        raise MalformedFieldError("User", "missing account section")

    usage = normalize_usage(export.get("Usage"))

    birth_date = parse_date(user.get("birth_date"))
    if birth_date is None:
        raise MalformedFieldError("User.birth_date", "missing or unreadable")

    raw_create_date = user.get("create_date")
    create_date = parse_date(raw_create_date)
    if create_date is None:
        opens = [record.date for record in usage if record.app_opens > 0]
        if not opens:
            raise MalformedFieldError("User.create_date", "missing and no app opens to infer it from")
        create_date = opens[0]
        raw_create_date = create_date
        logger.info("Account creation date inferred from earliest app open")

    vendor_id = f"{user['birth_date']}-{raw_create_date}"
    profile_id = derive_profile_id(Platform.TINDER.value, vendor_id)

    reference_day = usage[-1].date if usage else create_date
    city = get_mapping(user, "city")
    country = user.get("country")
    if isinstance(country, dict):
        country = country.get("code") or country.get("name")

    identity = Identity(
        age=age_on(birth_date, reference_day),
        gender=map_tinder_gender(user.get("gender")),
        interested_in=map_tinder_gender(user.get("interested_in")),
        city=to_optional_text(city.get("name")),
        region=to_optional_text(city.get("region")),
        country=to_optional_text(country),
        bio=to_optional_text(user.get("bio"), decode_entities=True),
        account_created=create_date,
        age_filter_min=to_optional_int(user.get("age_filter_min")),
        age_filter_max=to_optional_int(user.get("age_filter_max")),
        interests=normalize_interests(user),
        education_level=to_optional_text(user.get("education")),
        schools=normalize_schools(user),
        work=normalize_work(user)
    )

    profile = NormalizedProfile(
        profile_id=profile_id,
        platform=Platform.TINDER,
        identity=identity,
        usage=usage,
        matches=normalize_matches(export),
        media=normalize_photos(export),
        prompts=[]
    )
    logger.info(
        f"Normalized Tinder export: {len(profile.usage)} usage days, "
        f"{len(profile.matches)} matches, {len(profile.media)} photos"
    )
    return profile
