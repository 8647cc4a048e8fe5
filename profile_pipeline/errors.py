"""
Error taxonomy for the profile pipeline.

Every error carries two messages:
- ``str(exc)``: internal detail for logs (may name vendor fields)
- ``exc.user_message``: safe to show to the person who uploaded the file

Normalization errors are deterministic for a given input and must not be
retried. Aggregation and consent filtering never raise for a well-formed
NormalizedProfile; an exception there indicates a normalizer defect.
"""

from typing import Optional


class ProfilePipelineError(ValueError):
    """Base class for all pipeline errors surfaced to upload callers."""

    user_message = "This file could not be read."

    def __init__(self, detail: str, user_message: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        if user_message is not None:
            self.user_message = user_message


class UnrecognizedFormatError(ProfilePipelineError):
    """Raw input matches neither the Tinder nor the Hinge export schema."""

    user_message = (
        "This file could not be read. Please upload the data export "
        "you received from Tinder or Hinge."
    )


class MalformedFieldError(ProfilePipelineError):
    """
    A required structural element is present but has the wrong shape.

    Attributes:
        field: Vendor field path that failed (internal, for logs only)
    """

    def __init__(self, field: str, detail: str):
        super().__init__(f"{field}: {detail}")
        self.field = field


class PlatformMismatchError(ProfilePipelineError):
    """Two profiles from different platforms were passed to the merger."""

    user_message = "Profiles from different dating apps cannot be combined."


class ProfileNotFoundError(KeyError):
    """A profile id requested from storage does not exist."""

    def __init__(self, profile_id: str):
        super().__init__(profile_id)
        self.profile_id = profile_id

    def __str__(self) -> str:
        return f"Profile not found: {self.profile_id}"
