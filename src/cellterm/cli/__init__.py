"""Developer command line tools (requires the ``cli`` extra)."""
