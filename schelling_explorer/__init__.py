"""Schelling segregation explorer: grid, agents, movement dynamics, and engine."""

__version__ = "0.1.0"
