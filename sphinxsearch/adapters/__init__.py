"""
Adapters - External service integrations.

All calls to the search daemon are wrapped here to isolate domains from
protocol changes.
"""

from .sphinx import SphinxHttpClient, client_factory

__all__ = [
    "SphinxHttpClient",
    "client_factory",
]
