# File: markov_chain/preprocessing/bulk_loader.py

import csv
import gc
import io
import json
import logging
from datetime import datetime
from typing import Dict, List

from sqlalchemy import text
from sqlalchemy.orm import Session, sessionmaker

from markov_chain.core.config import settings
from markov_chain.core.types import Bigram, ChainEntry
from markov_chain.models import CHAIN_TABLE, CHAIN_BUILD_TABLE

logger = logging.getLogger("uvicorn")


class ChainBulkLoader:
    """
    Rebuilds the chain table from a complete set of entries.

    The new contents are written into a shadow table and published by renaming
    it over the live table, so readers see either the old snapshot or the new
    one, never a partial load.

    PostgreSQL fast path:
    1. Create an UNLOGGED build table without constraints, autovacuum off
    2. COPY CSV chunks into it
    3. Add primary key and topic index under build names
    4. In one transaction: drop the live table, rename build -> chain, rename indexes
    5. ANALYZE

    Other dialects (SQLite in tests) load the same shadow table with batched INSERTs.
    """

    def __init__(self, session_factory: sessionmaker, chunk_size: int | None = None, unlogged: bool | None = None):
        self.session_factory = session_factory
        self.chunk_size = chunk_size or settings.BULK_CHUNK_SIZE
        self.unlogged = settings.UNLOGGED_TABLES if unlogged is None else unlogged

    def rebuild(self, entries: Dict[Bigram, ChainEntry]) -> int:
        start_time = datetime.now()
        rows = [self._to_row(entry) for entry in entries.values()]

        with self.session_factory() as db:
            if db.get_bind().dialect.name == "postgresql":
                self._rebuild_postgres(db, rows)
            else:
                self._rebuild_generic(db, rows)

        total_time = (datetime.now() - start_time).total_seconds()
        logger.info(f"✅ Chain rebuilt with {len(rows):,} entries in {total_time:.2f}s")
        return len(rows)

    @staticmethod
    def _to_row(entry: ChainEntry) -> dict:
        return {
            "bigram_first": entry.bigram.first,
            "bigram_second": entry.bigram.second,
            "topic_first": entry.topic.first,
            "topic_second": entry.topic.second,
            "next_unigrams": json.dumps(entry.to_record()["next_unigrams"], ensure_ascii=False),
        }

    def _chunks(self, rows: List[dict]):
        total_chunks = (len(rows) + self.chunk_size - 1) // self.chunk_size
        for i in range(0, len(rows), self.chunk_size):
            yield (i // self.chunk_size) + 1, total_chunks, rows[i:i + self.chunk_size]

    # ----------------- PostgreSQL -----------------

    def _rebuild_postgres(self, db: Session, rows: List[dict]):
        unlogged = "UNLOGGED " if self.unlogged else ""
        try:
            # 0) Remove leftovers of an interrupted rebuild
            db.execute(text(f"DROP TABLE IF EXISTS {CHAIN_BUILD_TABLE}"))
            db.commit()

            # 1) Build table: no constraints, autovacuum off during load
            db.execute(text(f"""
                CREATE {unlogged}TABLE {CHAIN_BUILD_TABLE} (
                    bigram_first  VARCHAR NOT NULL,
                    bigram_second VARCHAR NOT NULL,
                    topic_first   VARCHAR NOT NULL,
                    topic_second  VARCHAR NOT NULL,
                    next_unigrams JSON    NOT NULL
                );
                ALTER TABLE {CHAIN_BUILD_TABLE} SET (autovacuum_enabled = off);
            """))
            db.commit()

            # 2) Stream -> CSV -> COPY
            raw_conn = db.connection().connection
            for chunk_num, total_chunks, chunk in self._chunks(rows):
                logger.info(f"🔄 COPY chunk {chunk_num}/{total_chunks} ({len(chunk):,} entries)")

                csv_buffer = io.StringIO()
                writer = csv.writer(csv_buffer, lineterminator="\n")
                for row in chunk:
                    writer.writerow([
                        row["bigram_first"], row["bigram_second"],
                        row["topic_first"], row["topic_second"],
                        row["next_unigrams"],
                    ])
                csv_buffer.seek(0)

                cur = raw_conn.cursor()
                try:
                    cur.copy_expert(
                        f"COPY {CHAIN_BUILD_TABLE} (bigram_first, bigram_second, topic_first, topic_second, next_unigrams) "
                        "FROM STDIN WITH (FORMAT CSV)",
                        csv_buffer
                    )
                    raw_conn.commit()
                except Exception as e:
                    raw_conn.rollback()
                    logger.error(f"❌ COPY failed for chunk {chunk_num}: {e}")
                    raise
                finally:
                    cur.close()

                del csv_buffer
                if (chunk_num % 5) == 0:
                    gc.collect()

            # 3) Constraints and indexes under build names
            logger.info("🧱 Adding primary key and topic index to build table…")
            db.execute(text(f"""
                ALTER TABLE {CHAIN_BUILD_TABLE}
                ADD CONSTRAINT {CHAIN_BUILD_TABLE}_pkey PRIMARY KEY (bigram_first, bigram_second);

                CREATE INDEX idx_{CHAIN_BUILD_TABLE}_topic ON {CHAIN_BUILD_TABLE} (topic_first, topic_second);
            """))
            db.commit()

            # 4) Publish atomically
            logger.info(f"🔁 Publishing build table as {CHAIN_TABLE}…")
            db.execute(text(f"""
                DROP TABLE IF EXISTS {CHAIN_TABLE};
                ALTER TABLE {CHAIN_BUILD_TABLE} RENAME TO {CHAIN_TABLE};
                ALTER INDEX {CHAIN_BUILD_TABLE}_pkey RENAME TO {CHAIN_TABLE}_pkey;
                ALTER INDEX idx_{CHAIN_BUILD_TABLE}_topic RENAME TO idx_{CHAIN_TABLE}_topic;
            """))
            db.commit()

            db.execute(text(f"ANALYZE {CHAIN_TABLE};"))
            db.commit()

        except Exception as e:
            db.rollback()
            logger.error(f"❌ Chain rebuild failed: {e}")
            raise

    # ----------------- Generic (SQLite and others) -----------------

    def _rebuild_generic(self, db: Session, rows: List[dict]):
        try:
            db.execute(text(f"DROP TABLE IF EXISTS {CHAIN_BUILD_TABLE}"))
            db.execute(text(f"""
                CREATE TABLE {CHAIN_BUILD_TABLE} (
                    bigram_first  VARCHAR NOT NULL,
                    bigram_second VARCHAR NOT NULL,
                    topic_first   VARCHAR NOT NULL,
                    topic_second  VARCHAR NOT NULL,
                    next_unigrams JSON    NOT NULL,
                    PRIMARY KEY (bigram_first, bigram_second)
                )
            """))
            db.commit()

            for chunk_num, total_chunks, chunk in self._chunks(rows):
                logger.info(f"🔄 Inserting chunk {chunk_num}/{total_chunks} ({len(chunk):,} entries)")
                db.execute(text(f"""
                    INSERT INTO {CHAIN_BUILD_TABLE}
                        (bigram_first, bigram_second, topic_first, topic_second, next_unigrams)
                    VALUES (:bigram_first, :bigram_second, :topic_first, :topic_second, :next_unigrams)
                """), chunk)
                db.commit()

            logger.info(f"🔁 Publishing build table as {CHAIN_TABLE}…")
            db.execute(text(f"DROP TABLE IF EXISTS {CHAIN_TABLE}"))
            db.execute(text(f"ALTER TABLE {CHAIN_BUILD_TABLE} RENAME TO {CHAIN_TABLE}"))
            db.execute(text(f"CREATE INDEX IF NOT EXISTS idx_{CHAIN_TABLE}_topic ON {CHAIN_TABLE} (topic_first, topic_second)"))
            db.commit()

        except Exception as e:
            db.rollback()
            logger.error(f"❌ Chain rebuild failed: {e}")
            raise
