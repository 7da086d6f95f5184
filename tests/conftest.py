import pytest

from prepares import RouteRegistry, RoutePrepare, RubyRoutesParser


@pytest.fixture(scope="session")
def ruby_parser():
    return RubyRoutesParser()


@pytest.fixture
def registry():
    return RouteRegistry()


@pytest.fixture
def prepare_routes(ruby_parser):
    """Parse routing source and return the prepared route strings."""
    def _prepare(content: str):
        registry = RouteRegistry()
        RoutePrepare(registry).process(ruby_parser.parse(content), file_path="config/routes.rb")
        return [str(route) for route in registry]
    return _prepare
