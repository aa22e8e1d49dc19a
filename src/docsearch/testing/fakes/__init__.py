"""Testing fakes – in-memory doubles for engine and kernel ports."""
from docsearch.kernel.time import FrozenClock
from docsearch.testing.fakes.opensearch import InMemoryOpenSearchClient

__all__ = ["FrozenClock", "InMemoryOpenSearchClient"]
