"""
Sphinx Adapter - searchd client over the HTTP JSON API.
"""

from .client import SphinxHttpClient, client_factory

__all__ = ["SphinxHttpClient", "client_factory"]
