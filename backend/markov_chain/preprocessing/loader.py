# File: markov_chain/preprocessing/loader.py
import os
from typing import Iterable, List

import pandas as pd

from markov_chain.core.errors import InvalidInput
from markov_chain.core.types import ChainEntry, coerce_entry

SNAPSHOT_COLUMNS = ["bigram", "topic", "next_unigrams"]


class ChainFileLoader:
    """Reads JSON-lines chain snapshots: one {"bigram", "topic", "next_unigrams"} record per line."""

    def __init__(self, path: str):
        self.path = path

    def load_frame(self) -> pd.DataFrame:
        if not os.path.exists(self.path):
            raise FileNotFoundError(f"Chain snapshot not found: {self.path}")
        if os.path.getsize(self.path) == 0:
            return pd.DataFrame(columns=SNAPSHOT_COLUMNS)

        try:
            df = pd.read_json(self.path, lines=True, dtype=False)
        except ValueError as e:
            raise InvalidInput(f"Malformed chain snapshot {self.path}: {e}") from None

        missing = [c for c in SNAPSHOT_COLUMNS if c not in df.columns]
        if missing:
            raise InvalidInput(f"Chain snapshot {self.path} is missing columns {missing}")
        return df[SNAPSHOT_COLUMNS]

    def load_entries(self) -> List[ChainEntry]:
        df = self.load_frame()
        entries = []
        for line_no, row in enumerate(df.itertuples(index=False), start=1):
            try:
                entries.append(coerce_entry((row.bigram, row.topic, row.next_unigrams)))
            except InvalidInput as e:
                raise InvalidInput(f"{self.path}:{line_no}: {e}") from None
        return entries


def export_entries(path: str, entries: Iterable[ChainEntry]) -> int:
    """Write entries as a JSON-lines snapshot readable by ChainFileLoader."""
    records = [entry.to_record() for entry in entries]
    if not records:
        open(path, "w", encoding="utf-8").close()
        return 0
    df = pd.DataFrame(records, columns=SNAPSHOT_COLUMNS)
    df.to_json(path, orient="records", lines=True, force_ascii=False)
    return len(records)
