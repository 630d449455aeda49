"""Unit tests — pure components, no database required."""

from datetime import date, datetime, timedelta, timezone

import pytest

from fitmemory import ranking, temporal
from fitmemory.embeddings import cosine_similarity
from fitmemory.extraction import build_entry, extract, is_activity_content
from fitmemory.models import build_table
from fitmemory.providers import SimilarityProvider
from fitmemory.types import (
    ActivityTags,
    Aggregates,
    MediaType,
    MemoryEntry,
    RankingConfig,
    SearchResult,
    TemporalWindow,
)
from tests.helpers import NOW, days_ago


class TestExtract:
    def test_leg_day_with_quantities(self):
        tags = extract("leg day: squats 4x8, leg press 3x15")
        assert "leg day" in tags.workout_types
        assert "legs" in tags.muscle_groups
        assert {"squats", "4x8", "3x15", "leg press"} <= tags.exercises

    def test_quantities(self):
        tags = extract("3 sets of 12 reps bench at 135 lbs")
        assert {"3 sets", "12 reps", "135 lbs", "bench"} <= tags.exercises
        assert "chest" in tags.muscle_groups

    def test_case_folded_and_deduplicated(self):
        tags = extract("BENCH Press then bench press again")
        assert "bench press" in tags.exercises
        assert "bench" in tags.exercises
        assert all(e == e.lower() for e in tags.exercises)

    def test_plural_exercise_names(self):
        tags = extract("finished with planks and crunches")
        assert {"planks", "crunches"} <= tags.exercises
        assert "core" in tags.muscle_groups

    def test_workout_type_from_equipment(self):
        tags = extract("30 minutes on the treadmill")
        assert "cardio" in tags.workout_types

    def test_no_signal(self):
        tags = extract("had a great lunch with friends")
        assert tags.is_empty
        assert tags == ActivityTags()

    def test_empty_text(self):
        assert extract("").is_empty

    def test_deterministic(self):
        text = "push day: bench press 5x5 at 100kg, overhead press, dips"
        assert extract(text) == extract(text)

    def test_exercise_names_match_whole_words(self):
        assert extract("checked my blood pressure after the diploma ceremony").exercises == frozenset()
        assert "fly" not in extract("flying home after leg day").exercises
        assert {"dips", "flys"} <= extract("dips and flys").exercises


class TestIsActivityContent:
    @pytest.mark.parametrize("text", [
        "Hit the gym this morning",
        "leg day!",
        "did some curls",
        "kettlebell swings",
    ])
    def test_activity(self, text):
        assert is_activity_content(text)

    @pytest.mark.parametrize("text", [
        "had a great lunch with friends",
        "xyzzy nonsense",
        "",
    ])
    def test_no_activity(self, text):
        assert not is_activity_content(text)


class TestBuildEntry:
    def test_tags_follow_text(self):
        e = build_entry("u1", "chest day: bench press", timestamp=NOW)
        assert e.muscle_groups == extract("chest day: bench press").muscle_groups
        assert e.activity_date == NOW.date()
        assert e.media_type == MediaType.TEXT

    def test_ids_unique(self):
        a = build_entry("u1", "squats")
        b = build_entry("u1", "squats")
        assert a.id != b.id

    def test_naive_timestamp_becomes_utc(self):
        e = build_entry("u1", "squats", timestamp=datetime(2024, 6, 14, 9))
        assert e.timestamp.tzinfo is not None
        assert e.timestamp == datetime(2024, 6, 14, 9, tzinfo=timezone.utc)


class TestCosineSimilarity:
    def test_identical_and_orthogonal(self):
        assert cosine_similarity([1.0, 0.0], [2.0, 0.0]) == pytest.approx(1.0)
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0

    def test_zero_vector(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_size_mismatch(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0], [1.0, 0.0])

    def test_embedding_text_leads_with_tags(self):
        e = build_entry("u1", "squats 5x5", timestamp=NOW)
        assert SimilarityProvider.embedding_text(e) == "5x5, legs, squats: squats 5x5"


class TestClassifyWindow:
    @pytest.mark.parametrize("query,window", [
        ("what did I do today", TemporalWindow.TODAY),
        ("Yesterday's workout?", TemporalWindow.YESTERDAY),
        ("what workouts did I do last week?", TemporalWindow.LAST_WEEK),
        ("my recent chest sessions", TemporalWindow.RECENT),
        ("what have I done recently", TemporalWindow.RECENT),
        ("chest", TemporalWindow.UNSCOPED),
        ("", TemporalWindow.UNSCOPED),
    ])
    def test_phrases(self, query, window):
        assert temporal.classify_window(query) == window

    def test_first_phrase_wins(self):
        assert temporal.classify_window("yesterday or today") == TemporalWindow.TODAY
        assert temporal.classify_window("recent, last week") == TemporalWindow.LAST_WEEK


class TestTemporalScore:
    def test_today(self):
        assert temporal.score(NOW - timedelta(hours=2), TemporalWindow.TODAY, NOW) == 1.0
        assert temporal.score(days_ago(1), TemporalWindow.TODAY, NOW) == 0.0

    def test_yesterday(self):
        assert temporal.score(days_ago(1), TemporalWindow.YESTERDAY, NOW) == 1.0
        assert temporal.score(NOW, TemporalWindow.YESTERDAY, NOW) == 0.0

    def test_last_week(self):
        assert temporal.score(days_ago(6), TemporalWindow.LAST_WEEK, NOW) == 0.8
        assert temporal.score(days_ago(8), TemporalWindow.LAST_WEEK, NOW) == 0.0

    def test_recent(self):
        assert temporal.score(days_ago(2), TemporalWindow.RECENT, NOW) == 0.7
        assert temporal.score(days_ago(4), TemporalWindow.RECENT, NOW) == 0.0

    def test_unscoped_always_zero(self):
        assert temporal.score(NOW, TemporalWindow.UNSCOPED, NOW) == 0.0

    @pytest.mark.parametrize("bad", [None, "not a date", object(), float("nan")])
    def test_unusable_timestamp_scores_zero(self, bad):
        assert temporal.score(bad, TemporalWindow.TODAY, NOW) == 0.0

    def test_epoch_and_iso_inputs(self):
        assert temporal.score(NOW.timestamp(), TemporalWindow.TODAY, NOW) == 1.0
        assert temporal.score(NOW.timestamp() * 1000, TemporalWindow.TODAY, NOW) == 1.0
        assert temporal.score(NOW.isoformat(), TemporalWindow.TODAY, NOW) == 1.0

    def test_custom_bonus(self):
        cfg = RankingConfig(last_week_bonus=2.0)
        assert temporal.score(days_ago(3), TemporalWindow.LAST_WEEK, NOW, cfg) == 2.0


def _entry(text: str, when: datetime = NOW, entry_id: str | None = None) -> MemoryEntry:
    return build_entry("u1", text, timestamp=when, entry_id=entry_id)


def _result(relevance: float, when: datetime, entry_id: str) -> SearchResult:
    e = _entry("squats", when, entry_id)
    return SearchResult(entry=e, relevance=relevance, matched_text=e.source_text)


class TestTokenize:
    def test_short_words_and_punctuation_dropped(self):
        assert ranking.tokenize("What did I do today?") == ["what", "did", "today"]

    def test_repeats_kept(self):
        assert ranking.tokenize("squats squats") == ["squats", "squats"]


class TestScore:
    def test_temporal_plus_keyword(self):
        e = _entry("leg day: squats 4x8")
        assert ranking.score(e, "squats today", now=NOW) == pytest.approx(1.3)

    def test_keyword_hits_tags(self):
        # "legs" is only in the extracted muscle groups, not the text
        e = _entry("squats 5x5", days_ago(30))
        assert ranking.score(e, "legs", now=NOW) == pytest.approx(0.3)

    def test_base_relevance_for_activity(self):
        e = _entry("deadlift session", days_ago(30))
        assert ranking.score(e, "show me everything", now=NOW) == pytest.approx(0.5)

    def test_no_base_without_activity(self):
        e = MemoryEntry(id="x", user_id="u1", source_text="lunch with friends", timestamp=NOW)
        assert ranking.score(e, "show me everything", now=NOW) == 0.0


class TestRank:
    def test_threshold_filters(self):
        cfg = RankingConfig(min_relevance=0.5)
        entries = [_entry("deadlift session", days_ago(30))]
        # base relevance 0.5 is not above a 0.5 threshold
        assert ranking.rank(entries, "anything", 10, now=NOW, config=cfg) == []

    def test_non_activity_entries_dropped(self):
        entries = [
            MemoryEntry(id="x", user_id="u1", source_text="lunch", timestamp=NOW),
            _entry("bench press"),
        ]
        results = ranking.rank(entries, "show me", 10, now=NOW)
        assert [r.entry.source_text for r in results] == ["bench press"]
        assert results[0].matched_text == "bench press"

    def test_today_ranks_first(self):
        old = _entry("squats and lunges", days_ago(10), "old")
        new = _entry("squats and lunges", NOW, "new")
        results = ranking.rank([old, new], "what did I do today", 10, now=NOW)
        assert results[0].entry.id == "new"

    def test_truncates_after_sorting(self):
        entries = [
            _entry("curls", days_ago(1), "a"),
            _entry("bench press chest", days_ago(2), "b"),
            _entry("bench press chest incline", days_ago(3), "c"),
            _entry("rows", days_ago(4), "d"),
        ]
        full = ranking.rank(entries, "bench press chest incline", 100, now=NOW)
        top = ranking.rank(entries, "bench press chest incline", 2, now=NOW)
        assert len(top) == 2
        assert [r.id for r in top] == [r.id for r in full[:2]]
        assert top[0].id == "c"

    def test_zero_limit(self):
        assert ranking.rank([_entry("squats")], "squats", 0, now=NOW) == []

    def test_negative_limit_raises(self):
        with pytest.raises(ValueError):
            ranking.rank([], "q", -1, now=NOW)


class TestOrderResults:
    def test_near_ties_break_by_recency(self):
        older = _result(1.0, days_ago(5), "older")
        newer = _result(0.95, days_ago(1), "newer")
        low = _result(0.3, NOW, "low")
        ordered = ranking.order_results([low, older, newer], 0.1)
        assert [r.id for r in ordered] == ["newer", "older", "low"]

    def test_adjacent_close_scores_are_newest_first(self):
        results = [
            _result(0.6, days_ago(3), "a"),
            _result(0.5, days_ago(1), "b"),
            _result(1.3, days_ago(9), "c"),
            _result(1.3, days_ago(2), "d"),
        ]
        ordered = ranking.order_results(results, 0.1)
        for prev, nxt in zip(ordered, ordered[1:]):
            if abs(prev.relevance - nxt.relevance) <= 0.1:
                assert prev.entry.timestamp >= nxt.entry.timestamp
            else:
                assert prev.relevance > nxt.relevance
        assert [r.id for r in ordered] == ["d", "c", "b", "a"]


class TestTypes:
    def test_activity_date_derived(self):
        e = MemoryEntry(id="1", user_id="u", source_text="squats", timestamp=NOW)
        assert e.activity_date == date(2024, 6, 15)

    def test_search_text_includes_tags(self):
        e = _entry("squats 5x5")
        assert "legs" in e.search_text

    def test_search_result_proxies(self):
        e = _entry("curls", entry_id="abc")
        r = SearchResult(entry=e, relevance=0.5, matched_text="curls")
        assert r.id == "abc"
        assert r.text == "curls"

    def test_format_results_empty(self):
        assert SearchResult.format_results([]) == "No workout memories found."

    def test_aggregates(self):
        a = SearchResult(entry=_entry("bench press", days_ago(3)), relevance=1.0)
        b = SearchResult(entry=_entry("squats 4x8", days_ago(1)), relevance=0.5)
        agg = Aggregates.from_results([a, b])
        assert agg.total_count == 2
        assert agg.date_range.start == days_ago(3).date()
        assert agg.date_range.end == days_ago(1).date()
        assert {"chest", "legs"} <= agg.muscle_groups
        assert {"bench press", "4x8"} <= agg.exercises

    def test_aggregates_empty(self):
        agg = Aggregates.from_results([])
        assert agg.total_count == 0
        assert agg.date_range.start is None and agg.date_range.end is None
        assert not agg.muscle_groups and not agg.exercises

    def test_ranking_defaults(self):
        cfg = RankingConfig()
        assert (cfg.today_bonus, cfg.last_week_bonus, cfg.recent_bonus) == (1.0, 0.8, 0.7)
        assert (cfg.keyword_bonus, cfg.base_relevance, cfg.min_relevance) == (0.3, 0.5, 0.2)


class TestBuildTable:
    def test_creates_class_with_tablename(self):
        Model = build_table("test_tbl")
        assert Model.__tablename__ == "test_tbl"

    def test_all_columns_present(self):
        Model = build_table("test_tbl_cols")
        col_names = {c.name for c in Model.__table__.columns}
        assert col_names == {
            "id", "user_id", "source_text", "media_ref", "media_type",
            "workout_types", "muscle_groups", "exercises",
            "timestamp", "activity_date",
        }

    def test_same_name_twice(self):
        assert build_table("dup").__tablename__ == build_table("dup").__tablename__

    def test_to_entry_roundtrip(self):
        Model = build_table("test_rt")
        e = build_entry(
            "u1", "leg day: squats", timestamp=NOW,
            media_ref="media://1", media_type=MediaType.VIDEO,
        )
        back = Model.from_entry(e).to_entry()
        assert back.id == e.id
        assert back.source_text == e.source_text
        assert back.media_type == MediaType.VIDEO
        assert back.muscle_groups == e.muscle_groups
        assert back.exercises == e.exercises
        assert back.activity_date == e.activity_date

    def test_naive_timestamp_read_as_utc(self):
        Model = build_table("test_naive")
        row = Model.from_entry(_entry("squats"))
        row.timestamp = datetime(2024, 6, 15, 9, 0)
        assert row.to_entry().timestamp.tzinfo == timezone.utc
