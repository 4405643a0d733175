"""transitdb HTTP API and command line."""
