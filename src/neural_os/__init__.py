"""
Neural OS
Renders LLM-generated micro-app blueprints and updates their data locally.
"""

__version__ = "0.1.0"
