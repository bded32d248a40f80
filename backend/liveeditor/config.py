"""
Live Editor configuration.

Every setting can be overridden with a LIVEEDITOR_* environment variable.
"""

import os

# Reflection bridge (the server mod's HTTP endpoint)
BRIDGE_URL = os.getenv("LIVEEDITOR_BRIDGE_URL", "http://127.0.0.1:8212")
BRIDGE_TIMEOUT = float(os.getenv("LIVEEDITOR_BRIDGE_TIMEOUT", "15"))

# Dashboard server settings
HOST = os.getenv("LIVEEDITOR_HOST", "127.0.0.1")
PORT = int(os.getenv("LIVEEDITOR_PORT", "8000"))
LOG_LEVEL = os.getenv("LIVEEDITOR_LOG_LEVEL", "INFO")

# Explorer defaults
DEFAULT_CLASS = os.getenv("LIVEEDITOR_DEFAULT_CLASS", "PalPlayerState")
DEFAULT_MAX_ITEMS = int(os.getenv("LIVEEDITOR_MAX_ITEMS", "50"))
PRESETS = [
    name.strip()
    for name in os.getenv(
        "LIVEEDITOR_PRESETS",
        "PalPlayerState,PalPlayerCharacter,PalPlayerController,"
        "PalGameStateInGame,PalCharacterParameterComponent",
    ).split(",")
    if name.strip()
]
