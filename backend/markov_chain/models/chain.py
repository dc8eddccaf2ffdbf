# markov_chain/models/chain.py
from sqlalchemy import Column, String, JSON, Index
from markov_chain.models.base import Base

CHAIN_TABLE = "chain"
CHAIN_BUILD_TABLE = "chain_build"


class ChainRow(Base):
    __tablename__ = CHAIN_TABLE

    bigram_first = Column(String, primary_key=True)
    bigram_second = Column(String, primary_key=True)
    topic_first = Column(String, nullable=False)
    topic_second = Column(String, nullable=False)
    next_unigrams = Column(JSON, nullable=False)  # [[seq_num, unigram], ...] in stored order

    __table_args__ = (
        Index("idx_chain_topic", "topic_first", "topic_second"),
    )
