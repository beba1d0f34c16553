"""
amnotifier - Alertmanager notifications for endpoint health checks.

Resolves layered provider configuration, turns endpoint health transitions
into Alertmanager API v2 alerts and delivers them over HTTP.
"""

__version__ = "0.1.0"
