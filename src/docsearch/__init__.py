"""
docsearch – structured search over OpenSearch-indexed documents.

Import path convention::

    from docsearch.application.search import SearchCriteria, compile_criteria
    from docsearch.adapters.opensearch import OpenSearchRepository
    from docsearch.kernel.errors import NotFoundError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
