"""
Exit codes for the taskdeck CLI.

Semantic exit codes so scripts wrapping the CLI can tell what happened.
"""

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Resource not found (unknown project, task or goal id)
ERROR_NOT_FOUND = 5

# A conflicting session is already running
ERROR_CONFLICT = 7
