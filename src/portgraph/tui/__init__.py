"""Interactive terminal UI for portgraph."""
