"""Tests for the task catalog and custom task parsing."""

import json

import pytest

from llm_bench.benchmark.base import Task
from llm_bench.benchmark.catalog import (
    DEFAULT_CATEGORIES,
    CatalogError,
    TaskCatalog,
    TaskParseError,
    build_default_tasks,
    parse_tasks,
)


def test_default_categories():
    catalog = TaskCatalog()
    assert catalog.categories == list(DEFAULT_CATEGORIES)
    assert len(catalog.get("math")) == 30
    assert len(catalog.get("qa")) == 26
    assert catalog.get("math")[3] == Task(
        question="Compute the square root of 4, rounded to two decimal places.",
        expected_answer="2.00",
    )
    assert catalog.get("logic")[0].expected_answer == "3"
    assert catalog.get("qa")[25].expected_answer == "Z"


def test_default_tasks_are_read_only():
    defaults = build_default_tasks()
    with pytest.raises(TypeError):
        defaults["math"] = ()


def test_parse_tasks_accepts_both_answer_keys():
    payload = json.dumps([
        {"question": "2+2?", "expectedAnswer": "4"},
        {"question": "Capital of Peru?", "answer": "Lima"},
    ])
    tasks = parse_tasks(payload)
    assert tasks == (
        Task(question="2+2?", expected_answer="4"),
        Task(question="Capital of Peru?", expected_answer="Lima"),
    )


@pytest.mark.parametrize("payload", [
    "not json",
    '{"question": "2+2?", "expectedAnswer": "4"}',
    '[{"question": "2+2?"}]',
    '[{"question": "", "expectedAnswer": "4"}]',
    "[]",
])
def test_parse_tasks_rejects_malformed_payloads(payload):
    with pytest.raises(TaskParseError):
        parse_tasks(payload)


def test_register_json_is_atomic():
    catalog = TaskCatalog(defaults={})
    payload = json.dumps([
        {"question": "ok?", "expectedAnswer": "yes"},
        {"question": "broken"},
    ])
    with pytest.raises(TaskParseError):
        catalog.register_json("custom", payload)
    assert "custom" not in catalog
    assert catalog.categories == []


def test_register_json_preserves_order():
    catalog = TaskCatalog(defaults={})
    payload = json.dumps([{"question": f"q{i}", "expectedAnswer": str(i)} for i in range(5)])
    catalog.register_json("numbers", payload)
    assert [t.question for t in catalog.get("numbers")] == ["q0", "q1", "q2", "q3", "q4"]


def test_register_rejects_empty_and_duplicate_names():
    catalog = TaskCatalog()
    tasks = [Task(question="q", expected_answer="a")]
    with pytest.raises(CatalogError):
        catalog.register("   ", tasks)
    with pytest.raises(CatalogError):
        catalog.register("math", tasks)
    # the default category is untouched
    assert len(catalog.get("math")) == 30


def test_register_file(tmp_path):
    path = tmp_path / "capitals.json"
    path.write_text(json.dumps([{"question": "Capital of France?", "expectedAnswer": "Paris"}]))
    catalog = TaskCatalog(defaults={})
    catalog.register_file("capitals", path)
    assert catalog.get("capitals")[0].expected_answer == "Paris"


def test_register_missing_file():
    catalog = TaskCatalog(defaults={})
    with pytest.raises(TaskParseError):
        catalog.register_file("capitals", "/nonexistent/capitals.json")
    assert "capitals" not in catalog


def test_get_unknown_category():
    with pytest.raises(KeyError):
        TaskCatalog().get("poetry")
