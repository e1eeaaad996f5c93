"""
Errors raised by the result-reporting collaborators.
"""


class CollaboratorFailure(Exception):
    """A win-counter or game-log call could not be completed."""
