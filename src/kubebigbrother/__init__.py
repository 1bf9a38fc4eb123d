"""
kubebigbrother — watch cluster resources and notify on change.

Resolves a hierarchical watch configuration into per-resource policies and
fans out add/delete/update notifications to callback, chat-bot, print and
group channels.
"""

__version__ = "0.1.0"
