"""Application layer: ports and the playback service."""
