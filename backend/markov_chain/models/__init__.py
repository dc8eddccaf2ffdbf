# File: markov_chain/models/__init__.py
from .base import Base
from .chain import ChainRow, CHAIN_TABLE, CHAIN_BUILD_TABLE

__all__ = [
    "Base",
    "ChainRow",
    "CHAIN_TABLE",
    "CHAIN_BUILD_TABLE",
]
