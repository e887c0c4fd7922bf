"""Core abstractions shared by the timer and history engines."""
