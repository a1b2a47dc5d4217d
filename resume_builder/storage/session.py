"""session.py
Holds the authenticated identity passed explicitly to every storage call.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Session:
    """
    The authenticated caller. Produced by the upstream identity provider and
    handed down explicitly; there is no ambient current user.

    Attributes:
        user_id (str): Opaque id of the signed-in user.
    """
    user_id: str
