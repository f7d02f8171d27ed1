"""HTTP surface of the voice server."""
