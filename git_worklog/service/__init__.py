"""HTTP API exposing the scan pipeline."""
