"""
JAM Signage - Shared Path Constants

Directory structure:
  /etc/jam/
    └── config/
        └── rotation.json    # Optional: rotation duration overrides

  /opt/jam/assets/
    └── sidebar_placeholder.png  # Shown when there are no sidebar ads

  ~/.jam/app_data/
    └── live_content/
        └── content.json     # Snapshot written by the content manager
"""

from pathlib import Path

from jam_signage import constants

# Base directories
JAM_ETC_DIR = Path('/etc/jam')
CONFIG_DIR = JAM_ETC_DIR / 'config'

# Configuration
ROTATION_CONFIG_FILE = CONFIG_DIR / 'rotation.json'

# Content snapshot (playlist, advertisers, ticker)
LIVE_CONTENT_FILE = Path(constants.LIVE_CONTENT_FILE_PATH)

# Static placeholder shown in the sidebar when no sidebar ads are configured
SIDEBAR_PLACEHOLDER_IMAGE = Path('/opt/jam/assets/sidebar_placeholder.png')
