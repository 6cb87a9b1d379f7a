"""
LinkGuard Content Services

Page credibility analysis and screenshots.
"""

from .crawler import ContentAnalyzer, parse_page, simulated_analysis
from .screenshot import ScreenshotService, placeholder_url_for, screenshot_url_for

__all__ = [
    'ContentAnalyzer',
    'parse_page',
    'simulated_analysis',
    'ScreenshotService',
    'placeholder_url_for',
    'screenshot_url_for',
]
