"""Integration tests for the SQLite example repositories."""

import sqlite3
from datetime import UTC, datetime

import pytest

from content_api.adapters.clock import FixedClock
from content_api.adapters.sqlite.repos import SQLiteExampleListRepo, SQLiteExampleRepo
from content_api.components.content import create_content_manager
from content_api.components.listing import ListRequest, run_list
from content_api.domain.dimension import DimensionAttributes
from content_api.domain.entities import Example, ExampleDimensionContent

EN = DimensionAttributes(locale="en")
DE = DimensionAttributes(locale="de")


@pytest.fixture
def repo(db_path):
    return SQLiteExampleRepo(db_path)


@pytest.fixture
def list_repo(db_path):
    return SQLiteExampleListRepo(db_path)


@pytest.fixture
def manager(rules):
    return create_content_manager(rules, FixedClock(datetime(2026, 1, 1, tzinfo=UTC)))


def _create(repo, manager, title, attrs=EN, **data):
    example = Example()
    manager.persist(example, {"title": title, **data}, attrs)
    return repo.save(example)


class TestSQLiteExampleRepo:
    def test_save_assigns_autoincrement_id(self, repo, manager):
        first = _create(repo, manager, "First")
        second = _create(repo, manager, "Second")

        assert first.id is not None
        assert second.id == first.id + 1

    def test_round_trips_dimension_contents(self, repo):
        published = datetime(2026, 2, 1, 9, 30, tzinfo=UTC)
        example = Example(
            dimension_contents=[
                ExampleDimensionContent(locale=None, stage="draft", available_locales=["en"]),
                ExampleDimensionContent(
                    locale="en",
                    stage="draft",
                    title="Hello",
                    template_key="default",
                    template_data={"blocks": [{"type": "text", "text": "hi"}]},
                    seo_no_index=True,
                    workflow_place="published",
                    workflow_published=published,
                ),
            ]
        )
        repo.save(example)

        loaded = repo.get_by_id(example.id)

        assert loaded is not None
        unlocalized = loaded.find_dimension_content(None, "draft")
        localized = loaded.find_dimension_content("en", "draft")
        assert unlocalized.available_locales == ["en"]
        assert localized.title == "Hello"
        assert localized.template_data == {"blocks": [{"type": "text", "text": "hi"}]}
        assert localized.seo_no_index is True
        assert localized.workflow_place == "published"
        assert localized.workflow_published == published

    def test_save_replaces_removed_dimension_contents(self, repo, manager):
        example = _create(repo, manager, "Hello")
        manager.apply_transition(example, EN, "publish")
        repo.save(example)
        assert repo.get_by_id(example.id).find_dimension_content("en", "live") is not None

        manager.apply_transition(example, EN, "unpublish")
        repo.save(example)

        loaded = repo.get_by_id(example.id)
        assert loaded.find_dimension_content("en", "live") is None
        assert loaded.find_dimension_content(None, "live") is None

    def test_get_missing_returns_none(self, repo):
        assert repo.get_by_id(12345) is None

    def test_delete_removes_dimension_contents(self, repo, manager, db_path):
        example = _create(repo, manager, "Hello")
        repo.delete(example.id)

        assert repo.get_by_id(example.id) is None
        conn = sqlite3.connect(db_path)
        try:
            count = conn.execute(
                "SELECT COUNT(*) FROM example_dimension_contents WHERE example_id = ?",
                (example.id,),
            ).fetchone()[0]
        finally:
            conn.close()
        assert count == 0


class TestSQLiteExampleListRepo:
    def test_lists_only_examples_with_content_in_locale(self, repo, list_repo, manager, rules):
        en = _create(repo, manager, "English")
        _create(repo, manager, "Deutsch", attrs=DE)

        result = run_list(
            ListRequest(locale="en"), repo=list_repo, rules=rules, resource_key="examples"
        )

        assert result.total == 1
        assert result.items == [
            {
                "id": en.id,
                "title": "English",
                "workflow_place": "unpublished",
                "workflow_published": None,
            }
        ]

    def test_search_sort_and_paging(self, repo, list_repo, manager, rules):
        for title in ["Banana", "Apple split", "Cherry", "Apple pie"]:
            _create(repo, manager, title)

        result = run_list(
            ListRequest(
                locale="en", search="apple", sort_by="title", sort_order="asc", limit=1, page=2
            ),
            repo=list_repo,
            rules=rules,
            resource_key="examples",
        )

        assert result.total == 2
        assert result.pages == 2
        assert [row["title"] for row in result.items] == ["Apple split"]

    def test_search_matches_wildcards_literally(self, repo, list_repo, manager, rules):
        _create(repo, manager, "Apple")
        _create(repo, manager, "100% juice")
        _create(repo, manager, "snake_case")

        def titles(search):
            result = run_list(
                ListRequest(locale="en", search=search),
                repo=list_repo,
                rules=rules,
                resource_key="examples",
            )
            return [row["title"] for row in result.items]

        assert titles("%") == ["100% juice"]
        assert titles("_") == ["snake_case"]
        assert titles("\\") == []

    def test_ids_filter(self, repo, list_repo, manager, rules):
        ids = [_create(repo, manager, f"Item {i}").id for i in range(3)]

        result = run_list(
            ListRequest(locale="en", ids=f"{ids[0]},{ids[2]}", excluded_ids=str(ids[2])),
            repo=list_repo,
            rules=rules,
            resource_key="examples",
        )

        assert [row["id"] for row in result.items] == [ids[0]]

    def test_empty_ids_matches_nothing(self, repo, list_repo, manager, rules):
        _create(repo, manager, "Hello")

        result = run_list(
            ListRequest(locale="en", ids=""), repo=list_repo, rules=rules, resource_key="examples"
        )

        assert result.total == 0
        assert result.items == []

    def test_selected_fields(self, repo, list_repo, manager, rules):
        _create(repo, manager, "Hello", template="example-2")

        result = run_list(
            ListRequest(locale="en", fields="template"),
            repo=list_repo,
            rules=rules,
            resource_key="examples",
        )

        assert set(result.items[0]) == {"template", "id", "title"}
        assert result.items[0]["template"] == "example-2"
