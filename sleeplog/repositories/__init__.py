"""
Persistence: key-value storage, entry store and entry repository.
"""
