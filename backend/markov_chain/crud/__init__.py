# markov_chain/crud/__init__.py
from .chain import chain_crud

__all__ = ["chain_crud"]
