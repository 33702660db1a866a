"""Host-authoritative werewolf match engine for browser party games."""

__version__ = "0.1.0"
