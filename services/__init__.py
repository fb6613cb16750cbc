"""Application services (health probes)."""
