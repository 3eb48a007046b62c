"""Application layer: the authorization orchestrator and its presets."""
