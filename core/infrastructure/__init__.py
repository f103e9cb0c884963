"""Infrastructure adapters: persistence, courier, notifications, database, config."""
