# site_mapper/crawler/__init__.py
"""Crawl engine: URL normalization, link extraction, frontier and orchestrator."""
