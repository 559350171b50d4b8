"""Application-layer ports."""
