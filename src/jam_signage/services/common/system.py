"""
JAM Signage - System Utilities

systemd integration shared by the signage services: notifier, graceful
shutdown signal handlers and GLib watchdog pings.
"""

import signal
import logging
from typing import Callable, Optional

import sdnotify

logger = logging.getLogger(__name__)

# Shared systemd notifier instance
_sd_notifier: Optional[sdnotify.SystemdNotifier] = None


def get_systemd_notifier() -> sdnotify.SystemdNotifier:
    """
    Get the shared systemd notifier instance.

    Returns:
        SystemdNotifier instance for communicating with systemd.
    """
    global _sd_notifier
    if _sd_notifier is None:
        _sd_notifier = sdnotify.SystemdNotifier()
    return _sd_notifier


def setup_signal_handlers(on_shutdown: Callable[[], None], service_logger: Optional[logging.Logger] = None) -> None:
    """
    Setup graceful shutdown signal handlers for SIGTERM and SIGINT.

    Args:
        on_shutdown: Callback invoked when shutdown is requested, e.g.
                     mainloop.quit for GLib services.
        service_logger: Optional logger to use for the shutdown message.
                        Defaults to the module logger.
    """
    log = service_logger or logger

    def shutdown_handler(signum, frame):
        sig_name = 'SIGTERM' if signum == signal.SIGTERM else 'SIGINT'
        log.info(f"Received {sig_name}, initiating graceful shutdown")
        on_shutdown()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)


def setup_glib_watchdog(interval_seconds: int = 30) -> None:
    """
    Setup systemd watchdog pinging using a GLib timeout.

    Args:
        interval_seconds: How often to ping the watchdog. Should be less than
                          the WatchdogSec value in the systemd unit file.

    Note:
        Must be called before the GLib main loop starts.
    """
    # Import GLib here to avoid requiring it for code that doesn't use it
    from gi.repository import GLib

    notifier = get_systemd_notifier()

    def ping_watchdog() -> bool:
        notifier.notify("WATCHDOG=1")
        return True  # Return True to keep the timeout active

    GLib.timeout_add_seconds(interval_seconds, ping_watchdog)
    logger.debug(f"Configured GLib watchdog ping every {interval_seconds}s")
