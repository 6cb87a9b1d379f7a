"""
LinkGuard - Multi-provider URL fraud and security risk checker.
"""

__version__ = "1.0.0"
