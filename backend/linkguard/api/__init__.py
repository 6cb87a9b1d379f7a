"""
LinkGuard API Package
"""
