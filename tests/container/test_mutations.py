"""Buffered mutation protocol of LazyQueryContainer."""

import pytest

from lazyquery.container.buffering import BufferingMode
from lazyquery.errors import InvalidValueError, SourceError, UnsupportedOperationError


def test_add_item_notifies_once_and_returns_view_id(mock_container, mock_view, item_events):
    mock_view.add_item.return_value = 3

    assert mock_container.add_item() == 3
    assert len(item_events) == 1
    assert item_events[0].container is mock_container


def test_add_item_twice_on_empty_container(make_people_container):
    container, _ = make_people_container()
    events = []
    container.add_item_set_change_listener(events.append)

    first = container.add_item()
    second = container.add_item()

    assert (first, second) == (0, 1)
    assert container.size() == 2
    assert container.contains_id(0) and container.contains_id(1)
    assert len(events) == 2


def test_add_item_grows_size_by_one(people_container):
    before = people_container.size()
    events = []
    people_container.add_item_set_change_listener(events.append)

    people_container.add_item()

    assert people_container.size() == before + 1
    assert len(events) == 1


def test_remove_item_delegates_and_reports_success(make_people_container):
    container, _ = make_people_container([{"name": "a", "age": 1}, {"name": "b", "age": 2}])
    events = []
    container.add_item_set_change_listener(events.append)

    assert container.remove_item(0) is True
    assert container.view.size() == 1
    assert container.get_item(0)["name"] == "b"
    assert len(events) == 1


def test_remove_item_requires_identity(mock_container, mock_view, item_events):
    with pytest.raises(TypeError):
        mock_container.remove_item("0")

    mock_view.remove_item.assert_not_called()
    assert item_events == []


@pytest.mark.parametrize("size", [0, 1, 100])
def test_remove_all_items_notifies_once(mock_container, mock_view, item_events, size):
    mock_view.size.return_value = size

    assert mock_container.remove_all_items() is True

    mock_view.remove_all_items.assert_called_once_with()
    mock_view.refresh.assert_called_once_with()
    assert len(item_events) == 1


def test_commit_without_changes_still_refreshes(mock_container, mock_view, item_events):
    mock_view.is_modified.return_value = False

    mock_container.commit()

    mock_view.commit.assert_called_once_with()
    mock_view.refresh.assert_called_once_with()
    assert len(item_events) == 1


@pytest.mark.parametrize("error", [InvalidValueError("bad"), SourceError("down")])
def test_commit_failure_propagates_without_refresh(mock_container, mock_view, item_events, error):
    mock_view.commit.side_effect = error

    with pytest.raises(type(error)):
        mock_container.commit()

    mock_view.refresh.assert_not_called()
    assert item_events == []


def test_commit_validation_failure_keeps_buffered_state(people_container, people_factory):
    people_container.get_item(0)["age"] = 99
    assert people_container.is_modified()
    people_factory.fail_with = InvalidValueError("age out of range")
    events = []
    people_container.add_item_set_change_listener(events.append)

    with pytest.raises(InvalidValueError):
        people_container.commit()

    assert people_container.is_modified()
    assert people_container.get_item(0)["age"] == 99
    assert events == []


def test_commit_writes_and_refreshes(people_container, people_factory):
    people_container.get_item(1)["age"] = 31
    new_id = people_container.add_item()
    people_container.get_item(new_id)["name"] = "dave"
    people_container.remove_item(0)
    events = []
    people_container.add_item_set_change_listener(events.append)

    people_container.commit()

    assert len(events) == 1
    assert not people_container.is_modified()
    assert people_factory.rows == [
        {"name": "alice", "age": 31},
        {"name": "bob", "age": 25},
        {"name": "dave", "age": 0},
    ]
    assert people_container.size() == 3


def test_discard_refreshes_on_success(mock_container, mock_view, item_events):
    mock_container.discard()

    mock_view.discard.assert_called_once_with()
    mock_view.refresh.assert_called_once_with()
    assert len(item_events) == 1


def test_discard_failure_propagates(mock_container, mock_view, item_events):
    mock_view.discard.side_effect = SourceError("down")

    with pytest.raises(SourceError):
        mock_container.discard()

    mock_view.refresh.assert_not_called()
    assert item_events == []


def test_discard_drops_buffered_changes(people_container):
    people_container.add_item()
    people_container.remove_item(0)

    people_container.discard()

    assert not people_container.is_modified()
    assert people_container.size() == 3
    assert people_container.get_item(0)["name"] == "carol"


def test_is_modified_reads_through(mock_container, mock_view):
    mock_view.is_modified.return_value = True
    assert mock_container.is_modified() is True
    mock_view.is_modified.return_value = False
    assert mock_container.is_modified() is False


@pytest.mark.parametrize(
    "call",
    [
        lambda c: c.add_item_at(0),
        lambda c: c.add_item_at(5, "x"),
        lambda c: c.add_item_after(0),
        lambda c: c.add_item_after(None, 3),
        lambda c: c.add_item_with_id(7),
    ],
)
def test_unsupported_mutation_shapes(mock_container, mock_view, item_events, call):
    with pytest.raises(UnsupportedOperationError):
        call(mock_container)

    mock_view.add_item.assert_not_called()
    assert item_events == []


def test_buffering_mode_is_fixed(mock_container):
    assert mock_container.buffering_mode is BufferingMode.BUFFERED
    assert mock_container.read_through is False
    assert mock_container.write_through is False

    with pytest.raises(AttributeError) as excinfo:
        mock_container.read_through = True
    assert not isinstance(excinfo.value, UnsupportedOperationError)
    with pytest.raises(AttributeError):
        mock_container.write_through = True

    assert mock_container.read_through is False
    assert mock_container.write_through is False


def test_sort_delegates_without_notification(mock_container, mock_view, item_events):
    mock_container.sort(["name"], [True])

    mock_view.sort.assert_called_once_with(["name"], [True])
    assert mock_container.size() == 3
    assert item_events == []


def test_sort_reorders_items(people_container):
    people_container.sort(["name"], [True])

    names = [people_container.get_item(i)["name"] for i in people_container.item_ids()]
    assert names == ["alice", "bob", "carol"]


def test_get_item_is_strict(mock_container, mock_view):
    with pytest.raises(TypeError):
        mock_container.get_item("0")
    mock_container.get_item(1)
    mock_view.get_item.assert_called_once_with(1)


def test_get_container_property(people_container):
    prop = people_container.get_container_property(1, "name")

    assert prop.value == "alice"
    assert prop.type is str
    prop.set_value("alicia")
    assert people_container.get_item(1)["name"] == "alicia"
    assert people_container.is_modified()


def test_get_item_out_of_range_raises(people_container):
    with pytest.raises(IndexError):
        people_container.get_item(3)
