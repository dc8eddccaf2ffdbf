# markov_chain/store/sql.py
from typing import Dict, Iterator

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from markov_chain.core.errors import NotFound
from markov_chain.core.types import Bigram, ChainEntry, to_bigram
from markov_chain.crud import chain_crud
from markov_chain.models import Base, CHAIN_TABLE
from markov_chain.preprocessing.bulk_loader import ChainBulkLoader
from markov_chain.store.base import TransitionStore


class SqlTransitionStore(TransitionStore):
    """Transition store backed by the relational `chain` table."""

    def __init__(self, engine: Engine, chunk_size: int | None = None, unlogged: bool | None = None):
        self.engine = engine
        self.SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
        self.bulk_loader = ChainBulkLoader(self.SessionLocal, chunk_size=chunk_size, unlogged=unlogged)

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def has_schema(self) -> bool:
        return CHAIN_TABLE in inspect(self.engine).get_table_names()

    def get(self, bigram) -> ChainEntry:
        key = to_bigram(bigram)
        with self.SessionLocal() as db:
            row = chain_crud.get_row(db, key)
            if row is None:
                raise NotFound(key)
            return chain_crud.to_entry(row)

    def _store(self, entry: ChainEntry) -> None:
        with self.SessionLocal() as db:
            chain_crud.upsert(db, entry)

    def _replace_all(self, entries: Dict[Bigram, ChainEntry]) -> None:
        self.bulk_loader.rebuild(entries)

    def count(self) -> int:
        with self.SessionLocal() as db:
            return chain_crud.count(db)

    def entries(self) -> Iterator[ChainEntry]:
        with self.SessionLocal() as db:
            for row in chain_crud.iter_rows(db):
                yield chain_crud.to_entry(row)
