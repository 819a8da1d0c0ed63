"""HTTP API for portgraph."""
