"""
Centralized client initialization module.

This module provides lazy-loaded shared clients for the application.
"""
from src.utils.templates_client import TemplatesClient
from src.services.templates import CycleTemplateCache

# Initialize shared clients (lazy loading)
_templates_client = None
_template_cache = None

def get_templates_client() -> TemplatesClient:
    """Get or create the cycle templates API client."""
    global _templates_client
    if _templates_client is None:
        _templates_client = TemplatesClient()
    return _templates_client

def get_template_cache() -> CycleTemplateCache:
    """Get or create the template cache for this Lambda container."""
    global _template_cache
    if _template_cache is None:
        _template_cache = CycleTemplateCache(get_templates_client())
    return _template_cache

def reset_clients() -> None:
    """Drop shared clients so they are rebuilt from the environment."""
    global _templates_client, _template_cache
    _templates_client = None
    _template_cache = None
