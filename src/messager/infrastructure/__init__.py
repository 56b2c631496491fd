"""
Messager infrastructure layer: adapters for auth, persistence, presence,
mail and lifecycle.
"""
