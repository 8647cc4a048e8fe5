"""
Canonical profile representation.

Defines the NormalizedProfile that every vendor export is mapped into.
The same structure is used for Tinder and Hinge; ``platform`` tags which
vendor the data came from.

Unknown-value sentinels:
- Optional scalars: None
- Collections: empty list
- Gender fields: Gender.UNKNOWN
- Daily counters: 0

Invariants:
- ``usage`` holds at most one record per date, ascending by date
- ``matches`` holds at most one record per vendor match identifier
- Messages within a match are ascending by ``sent_at``
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple

from .stats import DerivedStats


class Platform(Enum):
    """Dating platform an export came from."""
    TINDER = "tinder"
    HINGE = "hinge"


class Gender(Enum):
    """Closed gender enumeration shared by both platforms."""
    MALE = "M"
    FEMALE = "F"
    OTHER = "Other"
    MORE = "More"
    UNKNOWN = "Unknown"


class MessageType(Enum):
    """Message content types."""
    TEXT = "text"
    GIF = "gif"
    GESTURE = "gesture"
    CONTACT_CARD = "contact_card"
    ACTIVITY = "activity"
    VOICE_NOTE = "voice_note"
    OTHER = "other"


SENDER_USER = "user"
SENDER_MATCH = "match"

USAGE_COUNTERS = [
    "app_opens",
    "swipes_left",
    "swipes_right",
    "super_likes",
    "matches",
    "messages_sent",
    "messages_received",
]


def _as_int(value: Any) -> int:
    """Coerce a stored counter to int, treating anything unusable as zero."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


@dataclass
class UsageRecord:
    """
    Activity counters for one calendar day.

    Attributes:
        date: Day in YYYY-MM-DD format
        app_opens: Number of app opens
        swipes_left: Passes
        swipes_right: Likes
        super_likes: Super likes (Tinder only)
        matches: New matches that day
        messages_sent: Messages sent by the user
        messages_received: Messages received by the user
    """
    date: str
    app_opens: int = 0
    swipes_left: int = 0
    swipes_right: int = 0
    super_likes: int = 0
    matches: int = 0
    messages_sent: int = 0
    messages_received: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result: Dict[str, Any] = {"date": self.date}
        for counter in USAGE_COUNTERS:
            result[counter] = getattr(self, counter)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UsageRecord":
        """Create from dictionary. Missing counters are zero."""
        return cls(
            date=data["date"],
            **{counter: _as_int(data.get(counter, 0)) for counter in USAGE_COUNTERS}
        )


@dataclass
class MessageRecord:
    """
    A single chat message.

    Attributes:
        sender: SENDER_USER or SENDER_MATCH
        sent_at: ISO-8601 UTC timestamp (YYYY-MM-DDTHH:MM:SSZ)
        content: Decoded message text ("" for non-text messages)
        message_type: Kind of message
        media_url: GIF or voice-note URL, when the message carries one
    """
    sender: str
    sent_at: str
    content: str = ""
    message_type: MessageType = MessageType.TEXT
    media_url: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.message_type, str):
            self.message_type = MessageType(self.message_type)

    def dedup_key(self) -> Tuple[str, str, str]:
        """Key identifying the same message across overlapping exports."""
        return (self.sender, self.sent_at, self.content)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "sender": self.sender,
            "sent_at": self.sent_at,
            "content": self.content,
            "message_type": self.message_type.value,
            "media_url": self.media_url
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MessageRecord":
        """Create from dictionary."""
        return cls(
            sender=data.get("sender", SENDER_USER),
            sent_at=data["sent_at"],
            content=data.get("content", ""),
            message_type=data.get("message_type", MessageType.TEXT.value),
            media_url=data.get("media_url")
        )


@dataclass
class MatchRecord:
    """
    A mutual match and its conversation.

    Attributes:
        match_id: Vendor match identifier (None when the vendor provides none)
        order: Vendor-provided order index, if any
        matched_at: Timestamp the match happened (Hinge)
        liked_at: Timestamp the user liked the other person (Hinge)
        we_met: Answer to the "did you meet?" follow-up (Hinge)
        unmatched: Whether the user removed the match afterwards (Hinge)
        messages: Messages, ascending by sent_at
    """
    match_id: Optional[str] = None
    order: Optional[int] = None
    matched_at: Optional[str] = None
    liked_at: Optional[str] = None
    we_met: Optional[str] = None
    unmatched: bool = False
    messages: List[MessageRecord] = field(default_factory=list)

    @property
    def first_message_at(self) -> Optional[str]:
        """Send time of the earliest message, or None for an empty conversation."""
        if not self.messages:
            return None
        return min(message.sent_at for message in self.messages)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "match_id": self.match_id,
            "order": self.order,
            "matched_at": self.matched_at,
            "liked_at": self.liked_at,
            "we_met": self.we_met,
            "unmatched": self.unmatched,
            "messages": [message.to_dict() for message in self.messages]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchRecord":
        """Create from dictionary."""
        return cls(
            match_id=data.get("match_id"),
            order=data.get("order"),
            matched_at=data.get("matched_at"),
            liked_at=data.get("liked_at"),
            we_met=data.get("we_met"),
            unmatched=bool(data.get("unmatched", False)),
            messages=[MessageRecord.from_dict(m) for m in data.get("messages", [])]
        )


@dataclass
class MediaItem:
    """A photo (or video) reference from the user's profile."""
    url: str
    media_type: str = "photo"
    caption: Optional[str] = None
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "url": self.url,
            "media_type": self.media_type,
            "caption": self.caption,
            "created_at": self.created_at
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MediaItem":
        """Create from dictionary."""
        return cls(
            url=data["url"],
            media_type=data.get("media_type", "photo"),
            caption=data.get("caption"),
            created_at=data.get("created_at")
        )


@dataclass
class PromptEntry:
    """A profile prompt and the user's answer (Hinge)."""
    prompt: str
    answer: str = ""
    prompt_type: str = "text"
    options: List[str] = field(default_factory=list)
    created_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "prompt": self.prompt,
            "answer": self.answer,
            "prompt_type": self.prompt_type,
            "options": list(self.options),
            "created_at": self.created_at
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PromptEntry":
        """Create from dictionary."""
        return cls(
            prompt=data["prompt"],
            answer=data.get("answer", ""),
            prompt_type=data.get("prompt_type", "text"),
            options=list(data.get("options", [])),
            created_at=data.get("created_at")
        )


@dataclass
class WorkInfo:
    """
    Job title and workplaces, with their "displayed on profile" flags.

    The four fields are consent-gated as one unit: a value and its
    displayed flag are always cleared together.
    """
    job_title: Optional[str] = None
    job_title_displayed: bool = False
    workplaces: List[str] = field(default_factory=list)
    workplaces_displayed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "job_title": self.job_title,
            "job_title_displayed": self.job_title_displayed,
            "workplaces": list(self.workplaces),
            "workplaces_displayed": self.workplaces_displayed
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkInfo":
        """Create from dictionary."""
        return cls(
            job_title=data.get("job_title"),
            job_title_displayed=bool(data.get("job_title_displayed", False)),
            workplaces=list(data.get("workplaces", [])),
            workplaces_displayed=bool(data.get("workplaces_displayed", False))
        )


@dataclass
class Identity:
    """
    Current-state identity and settings fields.

    Attributes:
        age: Age at the last day of recorded usage
        gender: Normalized gender
        interested_in: Normalized gender the user is interested in
        city: City name
        region: Region / state
        country: Country code or name as exported
        bio: Profile bio (HTML entities decoded)
        account_created: Account creation day (YYYY-MM-DD)
        age_filter_min: Minimum age in the user's search filter
        age_filter_max: Maximum age in the user's search filter
        interests: Interest tags shown on the profile
        education_level: Highest education level
        schools: School names
        work: Job title / workplaces (consent-gated)
    """
    age: Optional[int] = None
    gender: Gender = Gender.UNKNOWN
    interested_in: Gender = Gender.UNKNOWN
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None
    bio: Optional[str] = None
    account_created: Optional[str] = None
    age_filter_min: Optional[int] = None
    age_filter_max: Optional[int] = None
    interests: List[str] = field(default_factory=list)
    education_level: Optional[str] = None
    schools: List[str] = field(default_factory=list)
    work: WorkInfo = field(default_factory=WorkInfo)

    def __post_init__(self):
        if isinstance(self.gender, str):
            self.gender = Gender(self.gender)
        if isinstance(self.interested_in, str):
            self.interested_in = Gender(self.interested_in)
        if isinstance(self.work, dict):
            self.work = WorkInfo.from_dict(self.work)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary with string enum values."""
        return {
            "age": self.age,
            "gender": self.gender.value,
            "interested_in": self.interested_in.value,
            "city": self.city,
            "region": self.region,
            "country": self.country,
            "bio": self.bio,
            "account_created": self.account_created,
            "age_filter_min": self.age_filter_min,
            "age_filter_max": self.age_filter_max,
            "interests": list(self.interests),
            "education_level": self.education_level,
            "schools": list(self.schools),
            "work": self.work.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Identity":
        """Create from dictionary."""
        return cls(
            age=data.get("age"),
            gender=data.get("gender", Gender.UNKNOWN.value),
            interested_in=data.get("interested_in", Gender.UNKNOWN.value),
            city=data.get("city"),
            region=data.get("region"),
            country=data.get("country"),
            bio=data.get("bio"),
            account_created=data.get("account_created"),
            age_filter_min=data.get("age_filter_min"),
            age_filter_max=data.get("age_filter_max"),
            interests=list(data.get("interests", [])),
            education_level=data.get("education_level"),
            schools=list(data.get("schools", [])),
            work=WorkInfo.from_dict(data.get("work", {}))
        )


@dataclass
class NormalizedProfile:
    """
    Platform-agnostic representation of one user's exported data.

    Attributes:
        profile_id: Stable one-way hash of the vendor account identity
        platform: Platform the export came from
        identity: Current-state identity fields
        usage: Daily usage records, ascending by date
        matches: Match records with their messages
        media: Profile photo references
        prompts: Profile prompt answers
        meta: Derived statistics (set by the aggregator, None until then)
    """
    profile_id: str
    platform: Platform
    identity: Identity = field(default_factory=Identity)
    usage: List[UsageRecord] = field(default_factory=list)
    matches: List[MatchRecord] = field(default_factory=list)
    media: List[MediaItem] = field(default_factory=list)
    prompts: List[PromptEntry] = field(default_factory=list)
    meta: Optional[DerivedStats] = None

    def __post_init__(self):
        if isinstance(self.platform, str):
            self.platform = Platform(self.platform)

    @property
    def usage_dates(self) -> List[str]:
        """Dates covered by ``usage``."""
        return [record.date for record in self.usage]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "profile_id": self.profile_id,
            "platform": self.platform.value,
            "identity": self.identity.to_dict(),
            "usage": [record.to_dict() for record in self.usage],
            "matches": [match.to_dict() for match in self.matches],
            "media": [item.to_dict() for item in self.media],
            "prompts": [prompt.to_dict() for prompt in self.prompts],
            "meta": self.meta.to_dict() if self.meta else None
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NormalizedProfile":
        """Create from dictionary."""
        meta = data.get("meta")
        return cls(
            profile_id=data["profile_id"],
            platform=data["platform"],
            identity=Identity.from_dict(data.get("identity", {})),
            usage=[UsageRecord.from_dict(u) for u in data.get("usage", [])],
            matches=[MatchRecord.from_dict(m) for m in data.get("matches", [])],
            media=[MediaItem.from_dict(m) for m in data.get("media", [])],
            prompts=[PromptEntry.from_dict(p) for p in data.get("prompts", [])],
            meta=DerivedStats.from_dict(meta) if meta else None
        )
