"""tasklane: local task manager built around a single task state engine."""
