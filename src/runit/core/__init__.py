"""Core primitives shared by every runit layer: settings, logging, errors."""
