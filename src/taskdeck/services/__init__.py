"""Services operating on the workspace and session state."""
