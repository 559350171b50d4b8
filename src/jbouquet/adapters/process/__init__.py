"""Process-level option sources (``eds.config``)."""
