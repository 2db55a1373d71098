"""Morpho GraphQL indexer access."""
from .client import GraphQLClient
from .index import MorphoIndex, paginate

__all__ = ["GraphQLClient", "MorphoIndex", "paginate"]
