"""
Save/load package.
"""
from .codec import PersistenceCodec, SaveBlob
from .store import JsonFileStore, MemoryStore, SaveStore
