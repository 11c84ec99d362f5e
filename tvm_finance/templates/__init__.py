"""Default settings and reference tables."""
