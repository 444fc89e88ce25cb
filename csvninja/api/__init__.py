"""HTTP API for the CSV splitter."""
