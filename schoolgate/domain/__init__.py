"""Domain layer: enums, value objects, entities, errors, and protocols."""
