"""Engine package: fingerprinting, retention, indexing, visibility, cleanup."""
