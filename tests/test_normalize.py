"""Tests for event normalization."""

import pytest

from eventswiper.core.errors import InvalidPayloadError, ValidationError
from eventswiper.core.events import Event
from eventswiper.core.normalize import (
    build_speaker_map,
    extract_entities,
    normalize_date,
    normalize_event,
    normalize_payloads,
    normalize_time,
    resolve_speakers,
    sort_events,
    strip_html,
    synthesize_event_id,
)


@pytest.fixture
def speakers_payload():
    return {
        "entities": [
            {
                "appSpeakerId": "s1",
                "firstName": "Ada",
                "lastName": "Lovelace",
                "jobTitle": "CTO",
                "company": "Engines Ltd",
                "speakerBiography": "<p>Pioneer</p>",
                "imageSrc": "https://img/ada.png",
            },
            {"appSpeakerId": "s2", "firstName": "", "lastName": ""},
            {"appSpeakerId": "s3", "firstName": "Grace"},
        ]
    }


@pytest.fixture
def events_payload():
    return {
        "entities": [
            {
                "eventId": "e1",
                "title": "Keynote",
                "dateLong": "Sunday 26 October",
                "dateIso": "20251026",
                "startTime": "900",
                "endTime": "1000",
                "eventVenue": "Hall A",
                "eventTypeName": "Keynote",
                "eventTopics": ["AI", "Payments"],
                "speakerData": [
                    {"appSpeakerId": "s1", "speakerType": "moderator"},
                    {"appSpeakerId": "s2", "speakerType": "panelist"},
                    {"appSpeakerId": "missing"},
                ],
            },
            {
                "eventId": "e2",
                "title": "Day two opener",
                "dateIso": "2025-10-27",
                "startTime": "0830",
                "endTime": "0900",
            },
            {
                "eventId": "e3",
                "title": "Early session",
                "dateIso": "10/26/2025",
                "startTime": "08:00",
                "endTime": "08:45",
            },
        ]
    }


class TestNormalizeDate:
    @pytest.mark.parametrize("raw", ["20251026", "2025-10-26", "10/26/2025"])
    def test_accepted_shapes(self, raw):
        assert normalize_date(raw) == "2025-10-26"

    def test_single_digit_month_and_day(self):
        assert normalize_date("3/7/2025") == "2025-03-07"

    @pytest.mark.parametrize("raw", ["bad-date", "", None, "26.10.2025", "2025/10/26", "Oct 26 2025"])
    def test_rejected_shapes(self, raw):
        assert normalize_date(raw) == ""

    def test_impossible_date_rejected(self):
        assert normalize_date("2025-02-30") == ""
        assert normalize_date("13/01/2025") == ""

    def test_whitespace_is_trimmed(self):
        assert normalize_date(" 2025-10-26 ") == "2025-10-26"

    def test_integer_input(self):
        assert normalize_date(20251026) == "2025-10-26"


class TestNormalizeTime:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("900", "0900"),
            ("1430", "1430"),
            ("143000", "1430"),
            ("14:30", "1430"),
            ("9:05", "0905"),
            ("14:30:00", "1430"),
            (930, "0930"),
        ],
    )
    def test_accepted(self, raw, expected):
        assert normalize_time(raw) == expected

    @pytest.mark.parametrize("raw", ["abc", "", None, "12", "12345", "2500", "1260"])
    def test_unknown(self, raw):
        assert normalize_time(raw) == ""


class TestStripHtml:
    def test_removes_tags(self):
        assert strip_html("<p>Hello <b>world</b></p>") == "Hello world"

    def test_decodes_entities(self):
        assert strip_html("Fish &amp; Chips") == "Fish & Chips"

    def test_empty(self):
        assert strip_html(None) == ""
        assert strip_html("") == ""


class TestExtractEntities:
    def test_returns_list(self):
        assert extract_entities({"entities": [{"a": 1}]}, "events") == [{"a": 1}]

    @pytest.mark.parametrize("payload", [None, [], {}, {"entities": None}, {"entities": {"a": 1}}, "x"])
    def test_invalid_payload(self, payload):
        with pytest.raises(InvalidPayloadError, match="Invalid events payload"):
            extract_entities(payload, "events")

    def test_invalid_payload_is_validation_error(self):
        with pytest.raises(ValidationError):
            extract_entities({}, "speakers")


class TestSpeakers:
    def test_build_map_composes_names(self, speakers_payload):
        speaker_map = build_speaker_map(speakers_payload["entities"])
        assert speaker_map["s1"]["name"] == "Ada Lovelace"
        assert speaker_map["s1"]["bio"] == "<p>Pioneer</p>"
        assert speaker_map["s2"]["name"] == ""
        assert speaker_map["s3"]["name"] == "Grace"

    def test_resolve_drops_unnamed(self, speakers_payload):
        speaker_map = build_speaker_map(speakers_payload["entities"])
        refs = [
            {"appSpeakerId": "s1", "speakerType": "moderator"},
            {"appSpeakerId": "s2"},
            {"appSpeakerId": "unknown"},
            {"appSpeakerId": "s3", "speakerType": "panelist"},
        ]

        speakers = resolve_speakers(refs, speaker_map)

        assert [s.name for s in speakers] == ["Ada Lovelace", "Grace"]
        assert speakers[0].type == "moderator"
        assert speakers[0].company == "Engines Ltd"
        assert speakers[1].type == "panelist"

    def test_resolve_non_list(self):
        assert resolve_speakers(None, {}) == []


class TestNormalizeEvent:
    def test_defaults(self):
        event = normalize_event({"eventId": "x"}, {})
        assert event.title == "Untitled Event"
        assert event.date_display == "Date TBA"
        assert event.venue == "Venue TBA"
        assert event.date_iso == ""
        assert event.start_time == ""
        assert event.topics == []
        assert event.speakers == []

    def test_missing_id_is_synthesized_stably(self):
        record = {"title": "Panel", "dateIso": "2025-10-26", "startTime": "1000"}
        first = normalize_event(record, {})
        second = normalize_event(dict(record), {})

        assert first.event_id.startswith("temp-")
        assert first.event_id == second.event_id
        assert first.event_id == synthesize_event_id("Panel", "2025-10-26", "1000", "Venue TBA")

    def test_different_events_get_different_ids(self):
        a = normalize_event({"title": "A", "dateIso": "2025-10-26"}, {})
        b = normalize_event({"title": "B", "dateIso": "2025-10-26"}, {})
        assert a.event_id != b.event_id

    def test_garbled_values_are_emptied(self):
        event = normalize_event(
            {"eventId": "x", "dateIso": "someday", "startTime": "noon", "endTime": "99"}, {}
        )
        assert event.date_iso == ""
        assert event.start_time == ""
        assert event.end_time == ""


class TestSortEvents:
    def _event(self, event_id, date_iso="", start_time=""):
        return Event(event_id=event_id, title=event_id, date_iso=date_iso, start_time=start_time)

    def test_by_date_then_time(self):
        events = [
            self._event("a", "2025-10-27", "0800"),
            self._event("b", "2025-10-26", "1400"),
            self._event("c", "2025-10-26", "0900"),
        ]
        assert [e.event_id for e in sort_events(events)] == ["c", "b", "a"]

    def test_empty_date_sorts_by_time(self):
        events = [
            self._event("a", "2025-10-26", "1400"),
            self._event("b", "", "0900"),
        ]
        assert [e.event_id for e in sort_events(events)] == ["b", "a"]

    def test_ties_preserved(self):
        events = [
            self._event("z", "2025-10-26", "0900"),
            self._event("a", "2025-10-26", "0900"),
            self._event("m", "", ""),
        ]
        assert [e.event_id for e in sort_events(events)] == ["z", "a", "m"]


class TestNormalizePayloads:
    def test_full_pipeline(self, events_payload, speakers_payload):
        events = normalize_payloads(events_payload, speakers_payload)

        assert [e.event_id for e in events] == ["e3", "e1", "e2"]
        keynote = events[1]
        assert keynote.date_iso == "2025-10-26"
        assert keynote.start_time == "0900"
        assert keynote.date_display == "Sunday 26 October"
        assert keynote.venue == "Hall A"
        assert keynote.event_type == "Keynote"
        assert keynote.topics == ["AI", "Payments"]
        assert [s.name for s in keynote.speakers] == ["Ada Lovelace"]

    def test_invalid_events_payload(self, speakers_payload):
        with pytest.raises(InvalidPayloadError, match="events"):
            normalize_payloads({"items": []}, speakers_payload)

    def test_invalid_speakers_payload(self, events_payload):
        with pytest.raises(InvalidPayloadError, match="speakers"):
            normalize_payloads(events_payload, {"entities": "nope"})

    def test_skips_non_dict_records(self, speakers_payload):
        events = normalize_payloads({"entities": ["junk", {"eventId": "ok"}]}, speakers_payload)
        assert [e.event_id for e in events] == ["ok"]
