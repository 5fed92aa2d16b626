"""LoL Potential MCP Server.

Fetch a League of Legends player's recent ranked games from the Riot API and
score their growth potential, with a Korean one-line summary, strengths and
improvements.
"""

__version__ = "0.1.0"
