"""Default configuration values for promptbot."""

from typing import Literal

# Storage
DATA_DIR: str = "data"
STATE_DB: str = "state.db"
STORAGE_BACKEND: Literal["memory", "sqlite"] = "sqlite"

# Turn log (audit trail of processed turns)
TURN_LOG_ENABLED: bool = True

# Logging
LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

# Identities used by the interactive CLI
CONVERSATION_ID: str = "console"
USER_ID: str = "console-user"

# All configurable keys (for validation)
CONFIG_KEYS = {
    "DATA_DIR",
    "STATE_DB",
    "STORAGE_BACKEND",
    "TURN_LOG_ENABLED",
    "LOG_LEVEL",
    "CONVERSATION_ID",
    "USER_ID",
}
