"""Tests for the merge engine."""

import pytest

from tubecast.feeds.merge import merge_new_episodes, order_newest_first
from tubecast.utils.errors import InconsistentFeedError


class TestMergeNewEpisodes:
    """Tests for merge_new_episodes."""

    def test_collision_filtering(self, episode_factory) -> None:
        """Published ids are dropped; the rest are numbered oldest first."""
        existing = [episode_factory("a", episode_number=5)]
        candidates = [episode_factory("a"), episode_factory("b"), episode_factory("c")]

        merged = merge_new_episodes(existing, candidates)

        assert [(e.id, e.episode_number) for e in merged] == [("c", 6), ("b", 7)]

    def test_empty_feed_starts_at_one(self, episode_factory) -> None:
        candidates = [episode_factory("z", day=3), episode_factory("y", day=2), episode_factory("x", day=1)]

        merged = merge_new_episodes([], candidates)

        assert [(e.id, e.episode_number) for e in merged] == [("x", 1), ("y", 2), ("z", 3)]

    def test_numbering_continues_from_newest(self, episode_factory) -> None:
        existing = [
            episode_factory("old3", episode_number=12),
            episode_factory("old2", episode_number=11),
            episode_factory("old1", episode_number=10),
        ]
        candidates = [episode_factory(f"new{i}") for i in range(4, 0, -1)]

        merged = merge_new_episodes(existing, candidates)

        assert [e.episode_number for e in merged] == [13, 14, 15, 16]
        assert [e.id for e in merged] == ["new1", "new2", "new3", "new4"]

    def test_second_merge_is_empty(self, episode_factory) -> None:
        """Merging the same candidates again adds nothing."""
        existing = [episode_factory("a", episode_number=1)]
        candidates = [episode_factory("c"), episode_factory("b"), episode_factory("a")]

        first = merge_new_episodes(existing, candidates)
        feed = list(reversed(first)) + existing
        second = merge_new_episodes(feed, candidates)

        assert [e.id for e in first] == ["b", "c"]
        assert second == []

    def test_nothing_new(self, episode_factory) -> None:
        existing = [episode_factory("a", episode_number=3), episode_factory("b", episode_number=2)]
        candidates = [episode_factory("a"), episode_factory("b")]

        assert merge_new_episodes(existing, candidates) == []

    def test_no_candidates(self, episode_factory) -> None:
        assert merge_new_episodes([episode_factory("a", episode_number=1)], []) == []
        assert merge_new_episodes([], []) == []

    def test_repeated_candidate_ids_added_once(self, episode_factory) -> None:
        candidates = [episode_factory("b"), episode_factory("a"), episode_factory("b")]

        merged = merge_new_episodes([], candidates)

        assert [(e.id, e.episode_number) for e in merged] == [("a", 1), ("b", 2)]

    def test_unnumbered_newest_episode_is_inconsistent(self, episode_factory) -> None:
        existing = [episode_factory("a", episode_number=None), episode_factory("b", episode_number=4)]

        with pytest.raises(InconsistentFeedError, match="'a'"):
            merge_new_episodes(existing, [episode_factory("c")])

    def test_inputs_are_not_modified(self, episode_factory) -> None:
        candidates = [episode_factory("b"), episode_factory("a")]

        merge_new_episodes([], candidates)

        assert all(e.episode_number is None for e in candidates)

    def test_other_fields_preserved(self, episode_factory) -> None:
        candidate = episode_factory("a", title="Keep me", duration=42)

        (merged,) = merge_new_episodes([], [candidate])

        assert merged.title == "Keep me"
        assert merged.duration == 42
        assert merged.source_url == candidate.source_url


class TestOrderNewestFirst:
    """Tests for order_newest_first."""

    def test_sorts_by_publish_date(self, episode_factory) -> None:
        episodes = [episode_factory("mid", day=2), episode_factory("old", day=1), episode_factory("new", day=3)]

        assert [e.id for e in order_newest_first(episodes)] == ["new", "mid", "old"]

    def test_same_day_keeps_source_order(self, episode_factory) -> None:
        episodes = [episode_factory("second", day=2), episode_factory("first", day=2), episode_factory("old", day=1)]

        assert [e.id for e in order_newest_first(episodes)] == ["second", "first", "old"]
