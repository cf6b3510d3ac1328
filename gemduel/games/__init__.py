"""
Games module - Game data for the engine.

Each game has its own subpackage with:
- Card and royal definitions
- Buff registry
- Caller-side match setup
"""
