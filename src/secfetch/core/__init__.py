"""Core building blocks: configuration, resilience and secrets resolution."""
