# foldkeep/logging/tags.py
"""
Logging subsystem tags.

Prefix log messages with these so output stays searchable.
"""

PERSISTENCE = "[PERSISTENCE]"
CAPTURE = "[CAPTURE]"
STORAGE = "[STORAGE]"
CONFIG = "[CONFIG]"
CLI = "[CLI]"
