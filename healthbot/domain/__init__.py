"""Domain models, trigger registry and static catalogs."""
