"""Configuration for CVLens."""
