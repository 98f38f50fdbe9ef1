"""Scout: adaptive discovery conversations.

Classifies who a user is from free text, adapts the questioning style turn by
turn, and owns the persisted session state each conversation depends on.
"""

__version__ = "0.1.0"
