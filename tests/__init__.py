"""
Test suite for the ATC terminal game.

This package contains tests for:
- The simulation core (headings, map, aircraft, spawning, command assembly, engine)
- Configuration, metrics and session recording
- The terminal layout and the gymnasium driver
"""
