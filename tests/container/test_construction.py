from lazyquery.config import DEFAULT_BATCH_SIZE
from lazyquery.container.model import LazyQueryContainer
from lazyquery.query.view import LazyQueryView


def test_from_factory_builds_lazy_view(people_factory):
    container = LazyQueryContainer.from_factory(people_factory, batch_size=10)

    assert isinstance(container.view, LazyQueryView)
    assert container.view.definition.batch_size == 10
    assert container.property_ids() == []
    assert container.size() == 3


def test_from_factory_default_batch_size(people_factory):
    container = LazyQueryContainer.from_factory(people_factory)

    assert container.view.definition.batch_size == DEFAULT_BATCH_SIZE


def test_from_definition_uses_given_schema(people_definition, people_factory):
    container = LazyQueryContainer.from_definition(people_definition, people_factory)

    assert container.view.definition is people_definition
    assert container.property_ids() == ["name", "age"]
    assert container.sortable_property_ids() == ["name", "age"]


def test_custom_view_is_used_as_is(mock_view):
    container = LazyQueryContainer(mock_view)

    assert container.view is mock_view
    assert container.size() == 3
    mock_view.size.assert_called_once_with()
