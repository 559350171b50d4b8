"""URL, filesystem, and embedded resource lookup."""
