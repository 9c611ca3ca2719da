# JAM Signage - Content Rotation Scheduler
#
# Decides what each region of the signage layout shows and for how long.
# All components run on one TimerLoop (GLib in the service, stepped in tests).
#
# Components:
#   - timer.py: TimerLoop implementations and RotationTimer
#   - slot_rotator.py: cyclic rotation of one slot (sidebar ads)
#   - ticker_alternator.py: ticker / stripe ad time-sharing
#   - fullscreen_interrupt.py: random fullscreen ad takeovers
#   - playlist_rotator.py: primary media playlist
#   - layout_controller.py: composes the above into one Presentation
