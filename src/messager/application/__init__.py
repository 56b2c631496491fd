"""
Messager application layer: use cases and DTOs.
"""
