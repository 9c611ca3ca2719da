import os

APP_DATA_DIR = os.path.join(
    os.path.expanduser('~'), ".jam", "app_data"
)

# Snapshot written by the content manager; the display service only reads it.
APP_DATA_LIVE_CONTENT_DIR = os.path.join(APP_DATA_DIR, "live_content")
LIVE_CONTENT_FILE_PATH = os.path.join(APP_DATA_LIVE_CONTENT_DIR, "content.json")

# Rotation defaults (overridable through RotationConfig)
DEFAULT_TICKER_DWELL_MS = 30000
DEFAULT_SIDEBAR_AD_SECONDS = 10
DEFAULT_STRIPE_AD_SECONDS = 10
DEFAULT_FULLSCREEN_AD_SECONDS = 15
DEFAULT_INTERRUPT_PERIOD_MS = 60000
DEFAULT_PRIMARY_IMAGE_SECONDS = 10
DEFAULT_CONTENT_POLL_SECONDS = 60

# Shortest duration a rotation timer may be armed for
MIN_TIMER_DURATION_MS = 100

# Longest dwell a single item may hold a slot (keeps timers within GLib's range)
MAX_DWELL_SECONDS = 24 * 60 * 60
