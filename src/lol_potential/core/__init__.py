"""Core business logic: metrics, scoring, narrative, the Riot client and data models.

This module is framework-agnostic. It has no dependency on MCP, FastMCP,
or any server framework.
"""
