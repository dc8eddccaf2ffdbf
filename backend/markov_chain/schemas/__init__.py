# markov_chain/schemas/__init__.py
from .chain import (
    ChainEntryData,
    BulkLoadRequest,
    BulkLoadResponse,
    PruneResponse,
    ChainStats,
    GenerateRequest,
    GenerateResponse,
)
