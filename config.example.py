"""
promptbot Configuration

Copy this file to config.py and adjust the values.
"""

# =============================================================================
# Storage
# =============================================================================

DATA_DIR = "data"                 # Directory holding the state database
STATE_DB = "state.db"             # sqlite file for state and the turn log
STORAGE_BACKEND = "sqlite"        # "sqlite" (durable) or "memory" (per process)

# =============================================================================
# Turn Log
# =============================================================================

TURN_LOG_ENABLED = True           # Record every processed turn for `promptbot history`

# =============================================================================
# Logging
# =============================================================================

LOG_LEVEL = "INFO"                # DEBUG shows ignored activities and discarded input

# =============================================================================
# Console Identities
# =============================================================================

CONVERSATION_ID = "console"       # Conversation used by `promptbot chat`
USER_ID = "console-user"          # User whose profile `promptbot chat` fills
