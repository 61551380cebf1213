"""Infrastructure adapters: persistence, HTTP integration, logging and wiring."""
