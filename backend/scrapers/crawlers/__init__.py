"""Crawler implementations."""

from .relay import RelayCrawler

__all__ = ['RelayCrawler']
