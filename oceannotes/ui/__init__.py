"""Qt user interface for Ocean Notes."""
