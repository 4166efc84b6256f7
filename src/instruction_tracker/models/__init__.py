"""Domain models: configuration, persisted settings, and result records."""
