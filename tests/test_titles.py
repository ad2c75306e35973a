"""Tests for title extraction and search-key normalization."""

from datetime import datetime

import pytest

from services.titles import extract_title, normalize_search_title


class TestExtractTitle:
    def test_lunch_with_sam(self, make_expression):
        expression = make_expression("tomorrow at noon", datetime(2025, 11, 2, 12, 0))

        assert extract_title("lunch with Sam tomorrow at noon", [expression]) == "lunch with Sam"

    def test_span_in_the_middle_leaves_single_spaces(self, make_expression):
        expression = make_expression("on Friday", datetime(2025, 11, 7, 9, 0))

        assert extract_title("dinner on Friday with Alex", [expression]) == "dinner with Alex"

    def test_only_first_occurrence_is_removed(self, make_expression):
        expression = make_expression("monday", datetime(2025, 11, 3, 9, 0))

        assert extract_title("monday planning monday", [expression]) == "planning monday"

    def test_expressions_removed_in_supplied_order(self, make_expression):
        expressions = [
            make_expression("tomorrow", datetime(2025, 11, 2, 9, 0)),
            make_expression("at 5pm", datetime(2025, 11, 1, 17, 0)),
        ]

        assert extract_title("gym tomorrow at 5pm", expressions) == "gym"

    def test_only_temporal_text_gives_empty_title(self, make_expression):
        expression = make_expression("tomorrow at 3pm", datetime(2025, 11, 2, 15, 0))

        assert extract_title("tomorrow at 3pm", [expression]) == ""

    def test_no_expressions_returns_trimmed_utterance(self):
        assert extract_title("  team offsite  ", []) == "team offsite"

    def test_spacing_away_from_the_span_is_kept(self, make_expression):
        expression = make_expression("tomorrow", datetime(2025, 11, 2, 9, 0))

        assert extract_title("Q&A  review tomorrow", [expression]) == "Q&A  review"
        assert extract_title("Q&A  review  tomorrow  with  Dana", [expression]) == "Q&A  review with  Dana"

    @pytest.mark.parametrize(
        "utterance, matched",
        [
            ("call mom next friday", "next friday"),
            ("tomorrow standup", "tomorrow"),
            ("pay rent on 1 December", "on 1 December"),
        ],
    )
    def test_matched_text_never_survives(self, make_expression, utterance, matched):
        expression = make_expression(matched, datetime(2025, 11, 2, 9, 0))

        assert matched not in extract_title(utterance, [expression])


class TestNormalizeSearchTitle:
    def test_cancel_without_date(self):
        assert normalize_search_title("cancel my dentist appointment", []) == "my dentist appointment"

    def test_span_removed_case_insensitively(self, make_expression):
        expression = make_expression("Tomorrow", datetime(2025, 11, 2, 9, 0))

        assert normalize_search_title("Cancel Team Sync Tomorrow", [expression]) == "team sync"

    @pytest.mark.parametrize("verb", ["cancel", "Delete", "REMOVE"])
    def test_action_verbs_are_stripped(self, verb):
        assert normalize_search_title(f"{verb} the standup", []) == "the standup"

    def test_verbs_match_whole_words_only(self):
        assert normalize_search_title("removed items review", []) == "removed items review"

    def test_every_occurrence_of_a_span_is_removed(self, make_expression):
        expression = make_expression("friday", datetime(2025, 11, 7, 9, 0))

        assert normalize_search_title("delete friday drinks friday", [expression]) == "drinks"

    def test_can_be_empty(self, make_expression):
        expression = make_expression("tomorrow", datetime(2025, 11, 2, 9, 0))

        assert normalize_search_title("cancel tomorrow", [expression]) == ""

    @pytest.mark.parametrize(
        "utterance, matched",
        [
            ("Cancel my dentist appointment Tomorrow", "Tomorrow"),
            ("delete   the  weekly  sync on Monday", "on Monday"),
            ("remove lunch", None),
            ("cancel", None),
        ],
    )
    def test_idempotent(self, make_expression, utterance, matched):
        expressions = [make_expression(matched, datetime(2025, 11, 3, 9, 0))] if matched else []

        once = normalize_search_title(utterance, expressions)

        assert normalize_search_title(once, expressions) == once
