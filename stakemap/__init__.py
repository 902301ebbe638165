"""Stakeholder perception mapping — placement aggregation and dissonance analysis."""

__version__ = "0.4.0"
