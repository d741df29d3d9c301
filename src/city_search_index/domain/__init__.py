"""Domain logic for the city search index (pure functions, no IO)."""
