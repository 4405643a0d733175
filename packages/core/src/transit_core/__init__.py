"""Core schemas and errors shared by the transitdb packages."""
