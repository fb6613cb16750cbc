"""Database plumbing shared by storage-backed cache providers."""
