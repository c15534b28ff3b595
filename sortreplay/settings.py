"""
User-tunable defaults.

Everything here can be overridden from a ``sortreplay.json`` file or the
command line (see ``sortreplay.utils.load_config`` and ``sortreplay.main``).
"""

import os

# ============================================================
# ===================== USER SETTINGS ========================
# ============================================================

ARRAY_SIZE = 50
MIN_VALUE  = 5
MAX_VALUE  = 100

DEFAULT_ALGORITHM = "bubble"

# Playback speed is the delay between two steps, in milliseconds.
DEFAULT_SPEED_MS = 50
MIN_SPEED_MS     = 5
MAX_SPEED_MS     = 200
SPEED_STEP_MS    = 5

# ============================================================
# ========================= VIEWER ===========================
# ============================================================

WINDOW_WIDTH  = 1100
WINDOW_HEIGHT = 680
FPS           = 120
BAR_SPACING   = 1

BACKGROUND_COLOR = (5, 5, 10)
ACTIVE_COLOR     = (255, 60, 60)
UI_TEXT          = (215, 215, 228)
UI_SUBTEXT       = (105, 105, 130)
UI_ACCENT        = (255, 55, 55)

# ============================================================
# ======================== FILES =============================
# ============================================================

CONFIG_FILENAME = "sortreplay.json"

LOG_FILE   = os.path.join("logs", "sortreplay.log")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVEL  = "INFO"
