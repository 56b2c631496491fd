"""
HTTP and WebSocket API for Messager.
"""
