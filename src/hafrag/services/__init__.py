"""Service layer — validation, registries, collection, and assembly."""
