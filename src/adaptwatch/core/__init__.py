"""Core discovery and qualification pipeline."""
