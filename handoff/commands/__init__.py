"""Command implementations bound to the CLI; each run_* returns an exit code."""
