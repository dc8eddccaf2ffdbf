import logging
import os
from datetime import datetime

from markov_chain.core.config import Settings, settings as default_settings
from markov_chain.preprocessing.loader import ChainFileLoader
from markov_chain.store import SqlTransitionStore

logger = logging.getLogger("uvicorn")


class ApplicationInitializer:
    """Creates the schema and, for an empty store, rebuilds it from the configured snapshot."""

    def __init__(self, store: SqlTransitionStore, settings: Settings | None = None):
        self.store = store
        self.settings = settings or default_settings

    def initialize_database(self) -> dict:
        logger.info("🔍 Checking database initialization status...")
        try:
            logger.info("🛠️ Creating database schema...")
            self.store.create_schema()
            logger.info("✅ Database schema ready")

            n_entries = self.store.count()
            status = {
                "chain_entries": n_entries,
                "snapshot_loaded": False,
                "load_time": 0.0,
                "pruned": 0,
            }

            if n_entries == 0:
                logger.info("📦 Chain table empty, looking for a snapshot...")
                status.update(self._load_snapshot())
            else:
                logger.info(f"✅ Chain already populated with {n_entries:,} entries!")

            if self.settings.PRUNE_THRESHOLD > 0 and status["chain_entries"] > 0:
                status["pruned"] = self.store.prune(self.settings.PRUNE_THRESHOLD)
                status["chain_entries"] = self.store.count()

            return status

        except Exception as e:
            logger.error(f"❌ Database initialization failed: {e}")
            return {
                "chain_entries": 0,
                "snapshot_loaded": False,
                "load_time": 0.0,
                "pruned": 0,
                "error": str(e)
            }

    def _load_snapshot(self) -> dict:
        path = self.settings.SNAPSHOT_PATH
        if not path:
            logger.warning("⚠️ No SNAPSHOT_PATH configured. Chain stays empty until a bulk load.")
            return {}
        if not os.path.exists(path):
            logger.warning(f"⚠️ Snapshot {path} not found. Chain stays empty until a bulk load.")
            return {}

        start_time = datetime.now()
        entries = ChainFileLoader(path).load_entries()
        logger.info(f"📊 Loaded {len(entries):,} entries from {path}")
        loaded = self.store.bulk_load(entries)
        load_time = (datetime.now() - start_time).total_seconds()

        logger.info(f"✅ Snapshot loaded in {load_time:.2f} seconds.")
        return {
            "chain_entries": loaded,
            "snapshot_loaded": True,
            "load_time": load_time,
        }

    def get_initialization_summary(self) -> dict:
        """Current store status for the health endpoint."""
        try:
            n_entries = self.store.count()
            return {
                "database": {
                    "chain_entries": n_entries,
                    "initialized": n_entries > 0
                },
                "snapshot_path": self.settings.SNAPSHOT_PATH,
                "weighting": self.settings.WEIGHTING,
            }
        except Exception as e:
            logger.error(f"Failed to get initialization summary: {e}")
            return {"error": str(e)}
