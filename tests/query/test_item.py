from unittest.mock import MagicMock

import pytest

from lazyquery.errors import InvalidValueError, ReadOnlyPropertyError
from lazyquery.query.definition import QueryDefinition


@pytest.fixture
def item():
    definition = QueryDefinition()
    definition.add_property("id", int, None)
    definition.add_property("title", str, "", read_only=False)
    return definition.create_item({"id": 7, "title": "draft"})


def test_set_marks_modified_and_calls_back(item):
    callback = MagicMock()
    item.set_change_callback(callback)

    item["title"] = "final"

    assert item["title"] == "final"
    assert item.is_modified()
    callback.assert_called_once_with(item)


def test_setting_same_value_is_not_a_change(item):
    callback = MagicMock()
    item.set_change_callback(callback)

    item.set("title", "draft")

    assert not item.is_modified()
    callback.assert_not_called()


def test_read_only_property_rejects_writes(item):
    with pytest.raises(ReadOnlyPropertyError):
        item.set("id", 8)
    assert item["id"] == 7


def test_wrong_type_rejected(item):
    with pytest.raises(InvalidValueError):
        item.set("title", 12)
    item.set("title", None)
    assert item["title"] is None


def test_item_property_view(item):
    prop = item.item_property("title")

    assert prop.id == "title"
    assert prop.type is str
    assert not prop.read_only
    prop.set_value("x")
    assert prop.value == "x"
    assert item.item_property("id").read_only


def test_unknown_property_raises(item):
    with pytest.raises(KeyError):
        item.get("missing")


def test_clear_modified(item):
    item["title"] = "x"
    item.clear_modified()
    assert not item.is_modified()


def test_item_reads_schema_changes():
    definition = QueryDefinition()
    definition.add_property("title", str, "", read_only=False)
    item = definition.create_item({"title": "draft"})

    definition.add_property("pages", int, 1)
    assert item["pages"] == 1
    assert item.item_property("pages").read_only

    definition.remove_property("title")
    assert item.property_ids() == ["pages"]
    with pytest.raises(KeyError):
        item.item_property("title")
