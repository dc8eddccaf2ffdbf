# markov_chain/crud/chain.py
from typing import Iterator, Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from markov_chain.core.types import Bigram, ChainEntry, make_entry
from markov_chain.models import ChainRow


class ChainCRUD:
    """Database operations for chain entries"""

    def get_row(self, db: Session, bigram: Bigram) -> Optional[ChainRow]:
        return db.get(ChainRow, (bigram.first, bigram.second))

    def upsert(self, db: Session, entry: ChainEntry) -> ChainRow:
        """Insert the entry, or replace topic and candidates of an existing one."""
        payload = entry.to_record()["next_unigrams"]
        row = self.get_row(db, entry.bigram)
        if row:
            row.topic_first = entry.topic.first
            row.topic_second = entry.topic.second
            row.next_unigrams = payload
        else:
            row = ChainRow(
                bigram_first=entry.bigram.first,
                bigram_second=entry.bigram.second,
                topic_first=entry.topic.first,
                topic_second=entry.topic.second,
                next_unigrams=payload,
            )
        db.add(row)
        db.commit()
        return row

    def count(self, db: Session) -> int:
        return db.scalar(select(func.count()).select_from(ChainRow)) or 0

    def iter_rows(self, db: Session, batch_size: int = 1000) -> Iterator[ChainRow]:
        """Stream every row ordered by key."""
        stmt = (
            select(ChainRow)
            .order_by(ChainRow.bigram_first, ChainRow.bigram_second)
            .execution_options(yield_per=batch_size)
        )
        yield from db.scalars(stmt)

    @staticmethod
    def to_entry(row: ChainRow) -> ChainEntry:
        return make_entry(
            (row.bigram_first, row.bigram_second),
            (row.topic_first, row.topic_second),
            row.next_unigrams,
        )

# Create instance
chain_crud = ChainCRUD()
