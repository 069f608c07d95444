"""HTTP API for the Trayex backend."""
