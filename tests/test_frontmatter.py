import unittest

from calendar_events.event_fields import build_event
from calendar_events.frontmatter import parse_frontmatter, parse_value, serialize_event


def _event(**overrides):
    event = {
        "id": "test-123",
        "title": "Test Event",
        "startDate": "2026-01-15",
        "endDate": "2026-01-15",
        "startTime": None,
        "endTime": None,
        "allDay": True,
        "color": "#8b5cf6",
        "type": "personal",
        "recurrence": "none",
        "recurrenceEnd": None,
        "recurrenceInterval": 1,
        "description": "This is a test",
    }
    event.update(overrides)
    return event


class TestParseFrontmatter(unittest.TestCase):
    def test_parses_fields_and_body(self):
        content = (
            "---\n"
            'title: "Test Event"\n'
            'startDate: "2026-01-15"\n'
            "allDay: true\n"
            "---\n"
            "\n"
            "Event description here."
        )
        fields, body = parse_frontmatter(content)
        self.assertEqual(fields["title"], "Test Event")
        self.assertEqual(fields["startDate"], "2026-01-15")
        self.assertIs(fields["allDay"], True)
        self.assertEqual(body, "Event description here.")

    def test_content_without_frontmatter_is_all_body(self):
        content = "Just some content without frontmatter"
        self.assertEqual(parse_frontmatter(content), ({}, content))

    def test_unterminated_block_fails_soft(self):
        content = "---\ntitle: x\nno closing delimiter"
        self.assertEqual(parse_frontmatter(content), ({}, content))

    def test_booleans_and_integers(self):
        fields, body = parse_frontmatter(
            "---\nallDay: true\nrecurring: false\nrecurrenceInterval: 2\n---"
        )
        self.assertIs(fields["allDay"], True)
        self.assertIs(fields["recurring"], False)
        self.assertEqual(fields["recurrenceInterval"], 2)
        self.assertEqual(body, "")

    def test_quoted_booleans_and_integers_are_coerced(self):
        fields, _ = parse_frontmatter(
            "---\nallDay: \"true\"\nrecurring: 'false'\nrecurrenceInterval: \"3\"\n---\n"
        )
        self.assertIs(fields["allDay"], True)
        self.assertIs(fields["recurring"], False)
        self.assertEqual(fields["recurrenceInterval"], 3)

    def test_quoted_dates_and_times_stay_strings(self):
        fields, _ = parse_frontmatter('---\nstartDate: "2026-01-15"\nstartTime: "09:00"\n---\n')
        self.assertEqual(fields["startDate"], "2026-01-15")
        self.assertEqual(fields["startTime"], "09:00")

    def test_splits_on_first_colon_only(self):
        fields, _ = parse_frontmatter('---\nstartTime: "09:30"\nnote: a: b\n---\n')
        self.assertEqual(fields["startTime"], "09:30")
        self.assertEqual(fields["note"], "a: b")

    def test_single_quotes_are_stripped(self):
        fields, _ = parse_frontmatter("---\ncolor: '#3b82f6'\n---\n")
        self.assertEqual(fields["color"], "#3b82f6")

    def test_unknown_keys_are_preserved(self):
        fields, _ = parse_frontmatter('---\nlocation: "Room 4"\npriority: 3\n---\n')
        self.assertEqual(fields["location"], "Room 4")
        self.assertEqual(fields["priority"], 3)

    def test_body_is_trimmed(self):
        _, body = parse_frontmatter("---\nid: \"a\"\n---\n\n\n  Notes  \n\n")
        self.assertEqual(body, "Notes")

    def test_windows_line_endings(self):
        fields, body = parse_frontmatter('---\r\ntitle: "Win"\r\n---\r\n\r\nBody')
        self.assertEqual(fields["title"], "Win")
        self.assertEqual(body, "Body")

    def test_non_string_input_fails_soft(self):
        self.assertEqual(parse_frontmatter(None), ({}, ""))

    def test_escaped_quotes_are_decoded(self):
        self.assertEqual(parse_value(r'"Say \"hi\""'), 'Say "hi"')

    def test_invalid_escape_falls_back_to_stripping(self):
        self.assertEqual(parse_value(r'"C:\qpath"'), r"C:\qpath")


class TestSerializeEvent(unittest.TestCase):
    def test_serializes_in_fixed_order(self):
        result = serialize_event(_event())
        self.assertEqual(
            result,
            "---\n"
            'id: "test-123"\n'
            'title: "Test Event"\n'
            'startDate: "2026-01-15"\n'
            "allDay: true\n"
            'color: "#8b5cf6"\n'
            'type: "personal"\n'
            "---\n"
            "\n"
            "This is a test",
        )

    def test_omits_end_date_when_same_as_start(self):
        self.assertNotIn("endDate", serialize_event(_event()))

    def test_includes_end_date_when_different(self):
        result = serialize_event(_event(endDate="2026-01-17"))
        self.assertIn('endDate: "2026-01-17"', result)

    def test_includes_times_for_timed_events(self):
        result = serialize_event(
            _event(allDay=False, startTime="09:00", endTime="10:30")
        )
        self.assertIn("allDay: false", result)
        self.assertIn('startTime: "09:00"', result)
        self.assertIn('endTime: "10:30"', result)

    def test_omits_times_for_all_day_events(self):
        result = serialize_event(_event(startTime="09:00", endTime="10:00"))
        self.assertNotIn("startTime", result)
        self.assertNotIn("endTime", result)

    def test_recurrence_fields(self):
        result = serialize_event(
            _event(recurrence="weekly", recurrenceEnd="2026-03-01", recurrenceInterval=2)
        )
        self.assertIn('recurrence: "weekly"', result)
        self.assertIn('recurrenceEnd: "2026-03-01"', result)
        self.assertIn("recurrenceInterval: 2", result)

    def test_interval_of_one_is_omitted(self):
        result = serialize_event(_event(recurrence="daily"))
        self.assertIn('recurrence: "daily"', result)
        self.assertNotIn("recurrenceInterval", result)
        self.assertNotIn("recurrenceEnd", result)

    def test_escapes_quotes_in_title(self):
        result = serialize_event(_event(title='The "Big" Day'))
        self.assertIn(r'title: "The \"Big\" Day"', result)

    def test_no_description_ends_after_delimiter(self):
        self.assertTrue(serialize_event(_event(description="")).endswith("---\n"))


class TestRoundTrip(unittest.TestCase):
    def _round_trip(self, event):
        fields, body = parse_frontmatter(serialize_event(event))
        return build_event(fields, description=body)

    def test_all_day_event(self):
        event = _event(endDate="2026-01-17", description="# Notes\n\n- item")
        self.assertEqual(self._round_trip(event), event)

    def test_timed_recurring_event(self):
        event = _event(
            title='Quote "this" \\ and that',
            allDay=False,
            startTime="08:15",
            endTime="09:45",
            type="work",
            color="#3b82f6",
            recurrence="monthly",
            recurrenceEnd="2026-12-31",
            recurrenceInterval=3,
        )
        self.assertEqual(self._round_trip(event), event)

    def test_numeric_looking_title_stays_a_string(self):
        event = _event(title="2026")
        self.assertEqual(parse_frontmatter(serialize_event(event))[0]["title"], 2026)
        self.assertEqual(self._round_trip(event)["title"], "2026")

    def test_boolean_looking_title_stays_a_string(self):
        event = _event(title="true")
        self.assertEqual(self._round_trip(event)["title"], "true")


if __name__ == "__main__":
    unittest.main()
