"""Infrastructure adapters: in-memory stores, Casbin evaluator, logging."""
