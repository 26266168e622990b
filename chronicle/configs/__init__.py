"""Settings and YAML-backed configuration for the chronicle package."""
