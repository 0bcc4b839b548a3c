"""Qt widgets for the launcher window."""
