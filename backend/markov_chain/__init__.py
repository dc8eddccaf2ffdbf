"""
Bigram transition store and random-walk generator.

    * store     : TransitionStore over a hash map or the relational `chain` table
    * generation: ChainWalker, weighted walk from a seed bigram
    * api       : FastAPI routes over both

Entries are built elsewhere and arrive through `bulk_load` or a JSON-lines snapshot.
"""
