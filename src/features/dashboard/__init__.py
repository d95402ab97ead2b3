"""Dashboard view lifecycle."""
