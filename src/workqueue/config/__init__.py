"""
Package: config
Description: Environment-driven configuration for the work-queue client.
"""

from workqueue.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
