"""
Live Editor - admin dashboard backend for a live game server.

Hosts the UObject Explorer: a path-based navigator over the running server's
object graph, reached through the reflection bridge exposed by the server mod.
"""

__version__ = "0.3.0"
