"""
Shared building blocks: WGS84/ENU geometry, message dataclasses, JSON logging.
"""
