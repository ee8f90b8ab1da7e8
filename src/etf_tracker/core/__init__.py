"""Core utilities: exceptions and time zone helpers."""
