"""
Pytest configuration and fixtures.

Raw exports are built fresh for every test, so tests may modify them.
"""

import copy

import pytest

from profile_pipeline.schema import (
    MatchRecord,
    MessageRecord,
    NormalizedProfile,
    Platform,
    UsageRecord,
)
from profile_pipeline.storage import InMemoryProfileStore


TINDER_EXPORT = {
    "User": {
        "birth_date": "1995-06-15T00:00:00.000Z",
        "create_date": "2022-12-01T10:00:00.000Z",
        "gender": "M",
        "interested_in": "F",
        "city": {"name": "Berlin", "region": "Berlin"},
        "country": {"code": "DE"},
        "bio": "Coffee &amp; hikes",
        "age_filter_min": 25,
        "age_filter_max": 35,
        "education": "Bachelors",
        "schools": [{"name": "TU Berlin"}],
        "jobs": [
            {
                "title": {"name": "Engineer", "displayed": True},
                "company": {"name": "Acme", "displayed": False},
            }
        ],
        "user_interests": ["Hiking", "Coffee"],
    },
    "Usage": {
        "app_opens": {"2023-01-01": 5, "2023-01-02": 3},
        "swipes_likes": {"2023-01-01": 10, "2023-01-02": 4},
        "swipes_passes": {"2023-01-01": 20, "2023-01-02": 6},
        "superlikes": {"2023-01-01": 1},
        "matches": {"2023-01-01": 2, "2023-01-02": 1},
        "messages_sent": {"2023-01-02": 3},
        "messages_received": {"2023-01-02": 2},
    },
    # Newest match first, as Tinder exports them
    "Messages": [
        {
            "match_id": "Match 2",
            "messages": [
                {"to": 2, "from": "You", "message": "Hey!", "sent_date": "Mon, 02 Jan 2023 18:00:00 GMT"},
            ],
        },
        {
            "match_id": "Match 1",
            "messages": [
                {"to": 1, "from": "You", "message": "Hi &amp; welcome", "sent_date": "Sun, 01 Jan 2023 20:15:00 GMT"},
                {
                    "to": 1,
                    "from": "You",
                    "message": "",
                    "sent_date": "Mon, 02 Jan 2023 09:00:00 GMT",
                    "type": "gif",
                    "fixed_height": "https://gifs.example/1.gif",
                },
                {"to": 1, "from": "You", "message": "lost"},
            ],
        },
    ],
    "Photos": [
        "https://images.example/1.jpg",
        {
            "id": "p2",
            "url": "https://images.example/2.jpg",
            "type": "photo",
            "created_at": "2023-01-01T10:00:00Z",
            "prompt_text": "Me &amp; my dog",
        },
    ],
}


HINGE_EXPORT = {
    "User": {
        "profile": {
            "age": 29,
            "gender": "Woman",
            "job_title": "Designer",
            "job_title_displayed": True,
            "workplaces": "[\"Globex\"]",
            "workplaces_displayed": True,
            "schools": "[\"RISD\"]",
            "education_attained": "Graduate",
        },
        "account": {"signup_time": "2022-03-04 10:00:00"},
        "preferences": {"age_min": 27, "age_max": 36, "gender_preference": "Men"},
        "location": {"country": "US"},
    },
    "Matches": [
        {
            "like": [{"timestamp": "2023-02-01 10:00:00", "like": [{"timestamp": "2023-02-01 10:00:00"}]}],
            "match": [{"timestamp": "2023-02-01 12:00:00"}],
            "chats": [
                {"body": "Hello", "timestamp": "2023-02-01 13:00:00"},
                {"body": "", "timestamp": "2023-02-02 09:00:00"},
            ],
            "voice_notes": [{"url": "https://voice.example/1.m4a", "timestamp": "2023-02-02 09:00:00"}],
            "we_met": [{"timestamp": "2023-02-10 10:00:00", "did_meet_subject": "Yes"}],
        },
        {
            "like": [{"timestamp": "2023-02-01 15:00:00", "like": [{"timestamp": "2023-02-01 15:00:00"}]}],
        },
        {
            "block": [{"block_type": "remove", "timestamp": "2023-02-02 08:00:00"}],
        },
        {
            "match": [{"timestamp": "2023-02-03 11:00:00"}],
            "block": [{"block_type": "remove", "timestamp": "2023-02-04 11:00:00"}],
        },
    ],
    "Prompts": [
        {
            "id": 1,
            "prompt": "A life goal of mine",
            "type": "text",
            "text": "Run a marathon",
            "created": "2022-03-05 10:00:00",
            "user_updated": "2022-03-05 10:00:00",
        },
        {
            "id": 2,
            "prompt": "Best travel story",
            "type": "prompt_poll",
            "options": ["Lisbon", "Kyoto"],
            "created": "2022-03-06 10:00:00",
            "user_updated": "2022-03-06 10:00:00",
        },
    ],
    "Media": [{"url": "https://media.example/1.jpg", "type": "photo", "prompt": None}],
}


@pytest.fixture
def tinder_export():
    """Raw Tinder export with two days of usage and two matches."""
    return copy.deepcopy(TINDER_EXPORT)


@pytest.fixture
def hinge_export():
    """Raw Hinge export with four conversation threads."""
    return copy.deepcopy(HINGE_EXPORT)


@pytest.fixture
def store():
    return InMemoryProfileStore()


def make_match(match_id, *sent, order=None):
    """Match record with one user message per timestamp."""
    return MatchRecord(
        match_id=match_id,
        order=order,
        messages=[MessageRecord(sender="user", sent_at=ts, content=f"msg {i}") for i, ts in enumerate(sent)]
    )


def make_profile(usage=None, matches=None, platform=Platform.TINDER, profile_id="p1"):
    """Minimal profile from ``{date: swipes_right}`` usage and match records."""
    return NormalizedProfile(
        profile_id=profile_id,
        platform=platform,
        usage=[UsageRecord(date=d, swipes_right=n) for d, n in sorted((usage or {}).items())],
        matches=list(matches or [])
    )
