# JAM Signage Services
#
# systemd service implementations for the signage player.
#
# Services:
#   - jam_signage_display.py: runs the content rotation on the GLib main loop
