"""
GTD agent: a Getting Things Done task manager with an AI assistant.
"""

__version__ = "0.1.0"
