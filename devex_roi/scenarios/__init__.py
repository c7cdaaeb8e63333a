"""Scenario catalog, presets and side-by-side comparison."""
