# JAM Signage Services - Common Utilities
#
# Shared utilities used across the signage services.
# Import directly from the specific module, not from this __init__.py.
#
# Example:
#   from jam_signage.services.common.paths import LIVE_CONTENT_FILE
#   from jam_signage.services.common.rotation_config import load_rotation_config
