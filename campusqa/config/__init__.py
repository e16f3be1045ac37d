"""
Configuration package for the campus Q&A review platform.

Holds the environment-driven settings used by the database,
logging and API layers.
"""

from campusqa.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
