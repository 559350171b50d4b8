"""YAML and properties decoders."""
