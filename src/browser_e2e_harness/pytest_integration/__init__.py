"""pytest integration package; the plugin lives in ``plugin``."""
