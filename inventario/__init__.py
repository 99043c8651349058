"""
Inventário - physical inventory verification

CSV ingestion of inventory bases and voice-driven item updates.
"""

__version__ = "0.1.0"
