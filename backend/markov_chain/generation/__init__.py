from .walker import ChainWalker, WalkResult

__all__ = ["ChainWalker", "WalkResult"]
