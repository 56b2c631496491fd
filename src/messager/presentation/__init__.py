"""
Messager presentation layer (FastAPI).
"""
