"""
Design (config.py)
- Purpose: Centralize constants and configuration.
- Inputs: None.
- Outputs: Constants (file names, input bounds, UI options).
- Side effects: None.
- Thread-safety: N/A (read-only constants).
"""

APP_TITLE = "Gas Transport Network"

# Folder under %APPDATA% used for the data file on Windows
APP_DIR_NAME = "Gas Network Manager"

# Persistence: default snapshot file (path resolved in storage module)
DATA_FILENAME = "network.txt"

# Audit trail: appended to, never truncated
AUDIT_LOG_FILENAME = "log.txt"

# Maximum number of log lines kept in the Logs panel (oldest trimmed)
LOG_MAX_LINES = 1000

# Input bounds enforced by the UI before calling the core
MIN_PIPE_LENGTH_KM = 0.01
MIN_PIPE_DIAMETER_MM = 1
MIN_TOTAL_WORKSHOPS = 1

CLASSIFICATION_OPTIONS = [
    "", "Head", "Intermediate", "Booster", "Underground storage", "Distribution",
]

NOTIFICATION_TIMEOUT_SEC = 5
