"""Identity provider clients."""

from waterwise.auth.firebase import FirebaseAuthClient, classify_error

__all__ = ["FirebaseAuthClient", "classify_error"]
