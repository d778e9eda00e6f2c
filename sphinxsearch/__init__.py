"""
sphinxsearch - Query composition and result pagination over a Sphinx search daemon.

Example:
    >>> from sphinxsearch.domains.search import SearchEngine, SearchRequest
    >>> engine = SearchEngine(settings, client_factory(settings))
    >>> results = await engine.search(SearchRequest(phrase="door fault"))
"""

__version__ = "2.0.0"
__all__ = ["__version__"]
