"""
fruit_catcher Package
=====================

Core game logic for Fruit Catcher: a basket slides along the bottom of the
screen catching falling fruit while dodging bombs.

- Falling item spawning
- Per-tick fall, collision and catch resolution
- Score and lives bookkeeping
- Tilt and pointer basket input

All tunable parameters live in game_config.yaml.
"""
