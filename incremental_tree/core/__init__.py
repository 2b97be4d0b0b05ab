"""Settings, exceptions and shared types."""
