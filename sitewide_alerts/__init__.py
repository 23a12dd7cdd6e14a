"""
Sitewide Alerts

Management commands and a reusable service for creating, deleting,
enabling and disabling alerts shown across the whole site.
"""

__version__ = '1.0.0'
