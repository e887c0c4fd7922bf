"""taskdeck - personal project/task tracker with focus and Pomodoro timers."""

__version__ = "0.3.0"
