"""
Tests for the file-based learning history repository
"""

import json

import pytest

from castengine.core.exceptions import StorageError
from castengine.services.storage import FileBasedHistoryRepository


@pytest.fixture
def repo(tmp_path):
    return FileBasedHistoryRepository(tmp_path / "data")


class TestRows:

    def test_empty_repository(self, repo):
        """Nothing stored yet reads as empty, not as an error"""
        assert repo.list_queries(0, 10) == []
        assert repo.list_podcasts(0, 10) == []
        assert repo.frequent_words(10) == []

    def test_insert_assigns_created_at(self, repo):
        """Appending stamps the row without mutating the caller's dict"""
        record = {"id": "q1", "input_text": "hello"}

        stored = repo.insert_query(record)

        assert stored["created_at"]
        assert "created_at" not in record

    def test_listing_is_newest_first_and_paged(self, repo):
        """Offsets page through rows from the most recent backwards"""
        for i in range(5):
            repo.insert_query({"id": f"q{i}"})

        assert [r["id"] for r in repo.list_queries(0, 2)] == ["q4", "q3"]
        assert [r["id"] for r in repo.list_queries(2, 2)] == ["q2", "q1"]
        assert [r["id"] for r in repo.list_queries(4, 2)] == ["q0"]
        assert repo.list_queries(6, 2) == []

    def test_podcasts_are_a_separate_table(self, repo):
        """Query and podcast rows never mix"""
        repo.insert_query({"id": "q1"})
        repo.insert_podcast({"id": "p1"})

        assert [r["id"] for r in repo.list_podcasts(0, 10)] == ["p1"]
        assert [r["id"] for r in repo.list_queries(0, 10)] == ["q1"]

    def test_rows_survive_a_new_instance(self, tmp_path):
        """Rows are persisted to disk"""
        FileBasedHistoryRepository(tmp_path).insert_podcast({"id": "p1"})

        assert FileBasedHistoryRepository(tmp_path).list_podcasts(0, 10)[0]["id"] == "p1"

    def test_corrupt_file_is_storage_error(self, tmp_path):
        """A table that is not a JSON list is reported, not overwritten"""
        (tmp_path / "query_records.json").write_text(json.dumps({"not": "a list"}))

        with pytest.raises(StorageError, match="Corrupt"):
            FileBasedHistoryRepository(tmp_path).list_queries(0, 10)


class TestWordFrequency:

    def test_counts_every_occurrence(self, repo):
        """Repeated words in one call are each counted"""
        repo.increment_words(["hello", "world", "hello"], "en")

        counts = {row["word"]: row["count"] for row in repo.frequent_words(10)}
        assert counts == {"hello": 2, "world": 1}

    def test_most_frequent_first(self, repo):
        """Ordering is by count, highest first, and limited"""
        repo.increment_words(["b"], "en")
        repo.increment_words(["a", "a", "a"], "en")
        repo.increment_words(["c", "c"], "en")

        assert [row["word"] for row in repo.frequent_words(2)] == ["a", "c"]

    def test_word_keeps_first_language(self, repo):
        """A later count under another language does not relabel the word"""
        repo.increment_words(["taxi"], "en")
        repo.increment_words(["taxi"], "fr")

        row = repo.frequent_words(1)[0]
        assert row["language"] == "en"
        assert row["count"] == 2
        assert row["last_queried_at"]
