"""Douban Persona HTTP API: relay, crawl, import and profile endpoints."""
