"""
Tests for vendor detection and Tinder/Hinge normalization.
"""

import json

import pytest

from profile_pipeline.anonymization import derive_profile_id, hash_identifier
from profile_pipeline.errors import MalformedFieldError, UnrecognizedFormatError
from profile_pipeline.normalization import detect_platform, normalize, sort_matches
from profile_pipeline.normalization.fields import (
    map_hinge_gender,
    map_tinder_gender,
    parse_json_array,
    parse_timestamp,
)
from profile_pipeline.schema import Gender, MessageType, Platform

from conftest import make_match


class TestDetectPlatform:
    """Vendor detection from top-level keys"""

    def test_tinder(self, tinder_export):
        assert detect_platform(tinder_export) == Platform.TINDER

    def test_hinge(self, hinge_export):
        assert detect_platform(hinge_export) == Platform.HINGE

    def test_hinge_prompts_only(self):
        assert detect_platform({"Prompts": []}) == Platform.HINGE

    def test_upload_wrappers(self, tinder_export, hinge_export):
        assert detect_platform({"tinderId": "x", "anonymizedTinderJson": tinder_export}) == Platform.TINDER
        assert detect_platform({"hingeId": "y", "anonymizedHingeJson": hinge_export}) == Platform.HINGE

    @pytest.mark.parametrize("raw", [{}, {"Something": 1}, [], "text", None, 42])
    def test_unrecognized(self, raw):
        with pytest.raises(UnrecognizedFormatError):
            normalize(raw)

    def test_unrecognized_has_user_message(self):
        with pytest.raises(UnrecognizedFormatError) as excinfo:
            normalize({"foo": "bar"})
        assert "Tinder or Hinge" in excinfo.value.user_message


class TestTinderNormalization:
    """Tinder export mapping"""

    def test_usage_union_of_dates(self, tinder_export):
        profile = normalize(tinder_export)
        assert profile.usage_dates == ["2023-01-01", "2023-01-02"]

        first, second = profile.usage
        assert first.swipes_right == 10
        assert first.swipes_left == 20
        assert first.super_likes == 1
        assert first.matches == 2
        assert first.app_opens == 5
        assert second.super_likes == 0
        assert second.messages_sent == 3
        assert second.messages_received == 2

    def test_date_present_in_one_counter_only(self, tinder_export):
        tinder_export["Usage"]["messages_sent"]["2023-01-05"] = 7
        profile = normalize(tinder_export)
        assert profile.usage_dates[-1] == "2023-01-05"
        assert profile.usage[-1].messages_sent == 7
        assert profile.usage[-1].swipes_right == 0

    def test_matches_in_chronological_order(self, tinder_export):
        profile = normalize(tinder_export)
        assert [m.match_id for m in profile.matches] == ["Match 1", "Match 2"]
        assert [m.order for m in profile.matches] == [0, 1]

    def test_messages(self, tinder_export):
        profile = normalize(tinder_export)
        messages = profile.matches[0].messages
        # the message without sent_date is dropped
        assert len(messages) == 2
        assert messages[0].content == "Hi & welcome"
        assert messages[0].sent_at == "2023-01-01T20:15:00Z"
        assert messages[0].sender == "user"
        assert messages[1].message_type == MessageType.GIF
        assert messages[1].media_url == "https://gifs.example/1.gif"

    def test_message_types(self, tinder_export):
        raw_messages = tinder_export["Messages"][0]["messages"]
        raw_messages.extend([
            {"from": "You", "message": "a", "sent_date": "2023-01-03T10:00:00Z", "type": "1"},
            {"from": "You", "message": "b", "sent_date": "2023-01-03T11:00:00Z", "type": "gesture"},
            {"from": "You", "message": "c", "sent_date": "2023-01-03T12:00:00Z", "type": "vibes"},
        ])
        profile = normalize(tinder_export)
        types = [m.message_type for m in profile.matches[1].messages]
        assert types == [MessageType.TEXT, MessageType.TEXT, MessageType.GESTURE, MessageType.OTHER]

    def test_identity(self, tinder_export):
        identity = normalize(tinder_export).identity
        assert identity.age == 27
        assert identity.gender == Gender.MALE
        assert identity.interested_in == Gender.FEMALE
        assert identity.city == "Berlin"
        assert identity.country == "DE"
        assert identity.bio == "Coffee & hikes"
        assert identity.account_created == "2022-12-01"
        assert identity.age_filter_min == 25
        assert identity.age_filter_max == 35
        assert identity.interests == ["Hiking", "Coffee"]
        assert identity.education_level == "Bachelors"
        assert identity.schools == ["TU Berlin"]

    def test_work_from_first_job(self, tinder_export):
        work = normalize(tinder_export).identity.work
        assert work.job_title == "Engineer"
        assert work.job_title_displayed is True
        assert work.workplaces == ["Acme"]
        assert work.workplaces_displayed is False

    def test_photos_both_formats(self, tinder_export):
        media = normalize(tinder_export).media
        assert [m.url for m in media] == ["https://images.example/1.jpg", "https://images.example/2.jpg"]
        assert media[0].caption is None
        assert media[1].caption == "Me & my dog"
        assert media[1].created_at == "2023-01-01T10:00:00Z"

    def test_missing_optional_fields_use_sentinels(self, tinder_export):
        user = tinder_export["User"]
        for key in ["gender", "interested_in", "city", "country", "bio", "jobs", "schools",
                    "user_interests", "education", "age_filter_min", "age_filter_max"]:
            user.pop(key)
        del tinder_export["Photos"]
        del tinder_export["Messages"]

        profile = normalize(tinder_export)
        identity = profile.identity
        assert identity.gender == Gender.UNKNOWN
        assert identity.interested_in == Gender.UNKNOWN
        assert identity.city is None
        assert identity.bio is None
        assert identity.interests == []
        assert identity.schools == []
        assert identity.work.job_title is None
        assert identity.work.workplaces == []
        assert profile.media == []
        assert profile.matches == []
        assert profile.prompts == []

    def test_profile_id(self, tinder_export):
        profile = normalize(tinder_export)
        expected = derive_profile_id("tinder", "1995-06-15T00:00:00.000Z-2022-12-01T10:00:00.000Z")
        assert profile.profile_id == expected

    def test_create_date_inferred_from_first_app_open(self, tinder_export):
        del tinder_export["User"]["create_date"]
        profile = normalize(tinder_export)
        assert profile.identity.account_created == "2023-01-01"
        assert profile.profile_id == derive_profile_id("tinder", "1995-06-15T00:00:00.000Z-2023-01-01")

    def test_vendor_identity_not_in_output(self, tinder_export):
        dumped = json.dumps(normalize(tinder_export).to_dict())
        assert "1995-06-15" not in dumped
        assert "2022-12-01T10:00:00.000Z" not in dumped

    def test_no_meta_after_normalization(self, tinder_export):
        assert normalize(tinder_export).meta is None

    def test_deterministic(self, tinder_export):
        assert normalize(tinder_export).to_dict() == normalize(tinder_export).to_dict()

    def test_wrapped_export(self, tinder_export):
        wrapped = {"tinderId": "abc", "anonymizedTinderJson": tinder_export}
        assert normalize(wrapped).to_dict() == normalize(tinder_export).to_dict()

    def test_single_day_scenario(self):
        export = {
            "User": {"birth_date": "1990-01-01", "create_date": "2022-06-01"},
            "Usage": {"swipes_likes": {"2023-01-01": 10}, "matches": {"2023-01-01": 2}},
            "Messages": [{"match_id": "m1", "messages": []}],
        }
        profile = normalize(export)
        assert profile.media == []
        assert len(profile.usage) == 1
        assert profile.usage[0].swipes_right == 10
        assert profile.usage[0].matches == 2
        assert len(profile.matches) == 1

    def test_repeated_match_id_collapsed(self, tinder_export):
        repeated = json.loads(json.dumps(tinder_export["Messages"][0]))
        repeated["messages"].append(
            {"from": "You", "message": "Still there?", "sent_date": "Tue, 03 Jan 2023 09:00:00 GMT"}
        )
        tinder_export["Messages"].insert(0, repeated)

        profile = normalize(tinder_export)
        assert [m.match_id for m in profile.matches] == ["Match 1", "Match 2"]
        assert [m.order for m in profile.matches] == [0, 1]
        assert [m.content for m in profile.matches[1].messages] == ["Hey!", "Still there?"]


class TestTinderMalformed:
    """Structural errors raise, descriptive ones degrade"""

    def test_usage_not_object(self, tinder_export):
        tinder_export["Usage"] = []
        with pytest.raises(MalformedFieldError) as excinfo:
            normalize(tinder_export)
        assert excinfo.value.field == "Usage"

    def test_usage_counter_not_object(self, tinder_export):
        tinder_export["Usage"]["swipes_likes"] = [1, 2]
        with pytest.raises(MalformedFieldError) as excinfo:
            normalize(tinder_export)
        assert excinfo.value.field == "Usage.swipes_likes"

    def test_messages_not_list(self, tinder_export):
        tinder_export["Messages"] = {"match_id": "x"}
        with pytest.raises(MalformedFieldError):
            normalize(tinder_export)

    def test_match_entry_not_object(self, tinder_export):
        tinder_export["Messages"].append("oops")
        with pytest.raises(MalformedFieldError):
            normalize(tinder_export)

    def test_missing_birth_date(self, tinder_export):
        del tinder_export["User"]["birth_date"]
        with pytest.raises(MalformedFieldError):
            normalize(tinder_export)

    def test_missing_user(self, tinder_export):
        del tinder_export["User"]
        with pytest.raises(MalformedFieldError):
            normalize(tinder_export)

    def test_error_is_value_error(self, tinder_export):
        tinder_export["Usage"] = "nope"
        with pytest.raises(ValueError):
            normalize(tinder_export)

    def test_malformed_photos_ignored(self, tinder_export):
        tinder_export["Photos"] = {"url": "x"}
        assert normalize(tinder_export).media == []

    def test_unreadable_usage_dates_skipped(self, tinder_export):
        tinder_export["Usage"]["app_opens"]["not a date"] = 4
        profile = normalize(tinder_export)
        assert profile.usage_dates == ["2023-01-01", "2023-01-02"]

    def test_non_numeric_counts_are_zero(self, tinder_export):
        tinder_export["Usage"]["superlikes"]["2023-01-02"] = "many"
        profile = normalize(tinder_export)
        assert profile.usage[1].super_likes == 0


class TestHingeNormalization:
    """Hinge export mapping"""

    def test_matches_are_threads_with_match(self, hinge_export):
        profile = normalize(hinge_export)
        assert len(profile.matches) == 2
        assert [m.order for m in profile.matches] == [0, 3]
        assert [m.match_id for m in profile.matches] == [
            hash_identifier("2023-02-01T12:00:00Z"),
            hash_identifier("2023-02-03T11:00:00Z"),
        ]

    def test_match_fields(self, hinge_export):
        first, second = normalize(hinge_export).matches
        assert first.matched_at == "2023-02-01T12:00:00Z"
        assert first.liked_at == "2023-02-01T10:00:00Z"
        assert first.we_met == "Yes"
        assert first.unmatched is False
        assert second.liked_at is None
        assert second.unmatched is True
        assert second.messages == []

    def test_voice_note(self, hinge_export):
        messages = normalize(hinge_export).matches[0].messages
        assert [m.message_type for m in messages] == [MessageType.TEXT, MessageType.VOICE_NOTE]
        assert messages[0].content == "Hello"
        assert messages[1].media_url == "https://voice.example/1.m4a"
        assert all(m.sender == "user" for m in messages)

    def test_empty_chat_without_voice_note_skipped(self, hinge_export):
        hinge_export["Matches"][0]["voice_notes"] = []
        messages = normalize(hinge_export).matches[0].messages
        assert [m.content for m in messages] == ["Hello"]

    def test_voice_note_matched_across_timestamp_formats(self, hinge_export):
        hinge_export["Matches"][0]["voice_notes"][0]["timestamp"] = "2023-02-02T09:00:00Z"
        messages = normalize(hinge_export).matches[0].messages
        assert messages[1].message_type == MessageType.VOICE_NOTE

    def test_unreadable_voice_note_timestamp(self, hinge_export):
        hinge_export["Matches"][0]["voice_notes"] = [{"url": "https://voice.example/2.m4a", "timestamp": ["2023"]}]
        messages = normalize(hinge_export).matches[0].messages
        assert [m.content for m in messages] == ["Hello"]

    def test_threads_with_same_match_time_collapsed(self, hinge_export):
        repeated = json.loads(json.dumps(hinge_export["Matches"][0]))
        repeated["chats"].append({"body": "See you Friday", "timestamp": "2023-02-05 19:00:00"})
        hinge_export["Matches"].append(repeated)

        profile = normalize(hinge_export)
        assert len(profile.matches) == 2
        first = profile.matches[0]
        assert first.order == 0
        assert [m.content for m in first.messages] == ["Hello", "", "See you Friday"]

    def test_usage_derived_from_events(self, hinge_export):
        usage = {record.date: record for record in normalize(hinge_export).usage}
        assert sorted(usage) == ["2023-02-01", "2023-02-02", "2023-02-03"]
        assert usage["2023-02-01"].swipes_right == 2
        assert usage["2023-02-01"].matches == 1
        assert usage["2023-02-01"].messages_sent == 1
        assert usage["2023-02-02"].swipes_left == 1
        assert usage["2023-02-02"].messages_sent == 1
        assert usage["2023-02-03"].matches == 1
        # an unmatch is not a pass
        assert usage["2023-02-03"].swipes_left == 0

    def test_identity(self, hinge_export):
        identity = normalize(hinge_export).identity
        assert identity.age == 29
        assert identity.gender == Gender.FEMALE
        assert identity.interested_in == Gender.MALE
        assert identity.country == "US"
        assert identity.account_created == "2022-03-04"
        assert identity.age_filter_min == 27
        assert identity.age_filter_max == 36
        assert identity.education_level == "Graduate"
        assert identity.schools == ["RISD"]

    def test_work_json_arrays(self, hinge_export):
        work = normalize(hinge_export).identity.work
        assert work.job_title == "Designer"
        assert work.workplaces == ["Globex"]
        assert work.workplaces_displayed is True

    def test_undecodable_json_array(self, hinge_export):
        hinge_export["User"]["profile"]["workplaces"] = "[not json"
        assert normalize(hinge_export).identity.work.workplaces == []

    def test_prompts_and_media(self, hinge_export):
        profile = normalize(hinge_export)
        assert [p.prompt for p in profile.prompts] == ["A life goal of mine", "Best travel story"]
        assert profile.prompts[0].answer == "Run a marathon"
        assert profile.prompts[1].options == ["Lisbon", "Kyoto"]
        assert profile.prompts[1].prompt_type == "prompt_poll"
        assert [m.url for m in profile.media] == ["https://media.example/1.jpg"]

    def test_profile_id(self, hinge_export):
        profile = normalize(hinge_export)
        assert profile.profile_id == derive_profile_id("hinge", "29-2022-03-04 10:00:00")
        assert "2022-03-04 10:00:00" not in json.dumps(profile.to_dict())

    def test_matches_not_list(self, hinge_export):
        hinge_export["Matches"] = {"chats": []}
        with pytest.raises(MalformedFieldError):
            normalize(hinge_export)

    def test_thread_not_object(self, hinge_export):
        hinge_export["Matches"].append(None)
        with pytest.raises(MalformedFieldError):
            normalize(hinge_export)

    def test_missing_signup_time(self, hinge_export):
        del hinge_export["User"]["account"]["signup_time"]
        with pytest.raises(MalformedFieldError):
            normalize(hinge_export)

    def test_malformed_prompts_ignored(self, hinge_export):
        hinge_export["Prompts"] = "nope"
        hinge_export["Media"] = 5
        profile = normalize(hinge_export)
        assert profile.prompts == []
        assert profile.media == []


class TestFieldHelpers:
    """Gender maps, timestamps and JSON arrays"""

    @pytest.mark.parametrize("value,expected", [
        ("M", Gender.MALE),
        ("F", Gender.FEMALE),
        ("Other", Gender.OTHER),
        ("More", Gender.MORE),
        ("Unknown", Gender.UNKNOWN),
        ("X", Gender.UNKNOWN),
        (None, Gender.UNKNOWN),
        (3, Gender.UNKNOWN),
    ])
    def test_tinder_gender(self, value, expected):
        assert map_tinder_gender(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("Man", Gender.MALE),
        ("Woman", Gender.FEMALE),
        ("Nonbinary", Gender.OTHER),
        ("Non-binary", Gender.OTHER),
        ("Prefer not to say", Gender.UNKNOWN),
        ("", Gender.UNKNOWN),
        (None, Gender.UNKNOWN),
    ])
    def test_hinge_gender(self, value, expected):
        assert map_hinge_gender(value) == expected

    def test_parse_timestamp(self):
        assert parse_timestamp("Tue, 30 Nov 2021 05:08:21 GMT") == "2021-11-30T05:08:21Z"
        assert parse_timestamp("2023-01-01T10:00:00.000Z") == "2023-01-01T10:00:00Z"
        assert parse_timestamp("2023-01-01T12:00:00+02:00") == "2023-01-01T10:00:00Z"
        assert parse_timestamp("garbage") is None
        assert parse_timestamp("") is None
        assert parse_timestamp(None) is None

    def test_parse_json_array(self):
        assert parse_json_array("[\"a\", \"b\"]") == ["a", "b"]
        assert parse_json_array(["a"]) == ["a"]
        assert parse_json_array("{\"a\": 1}") == []
        assert parse_json_array("") == []
        assert parse_json_array(None) == []


class TestMatchOrdering:
    """Fallback ordering for matches without a vendor index"""

    def test_vendor_order_first(self):
        a = make_match("a", "2023-01-05T00:00:00Z", order=1)
        b = make_match("b", "2023-01-01T00:00:00Z", order=0)
        assert [m.match_id for m in sort_matches([a, b])] == ["b", "a"]

    def test_chronological_fallback_with_empty_last(self):
        empty = make_match("empty")
        late = make_match("late", "2023-03-01T00:00:00Z")
        early = make_match("early", "2023-01-01T00:00:00Z")
        indexed = make_match("indexed", "2023-06-01T00:00:00Z", order=0)
        ordered = sort_matches([empty, late, indexed, early])
        assert [m.match_id for m in ordered] == ["indexed", "early", "late", "empty"]

    def test_stable_for_ties(self):
        first = make_match("first")
        second = make_match("second")
        assert [m.match_id for m in sort_matches([first, second])] == ["first", "second"]
