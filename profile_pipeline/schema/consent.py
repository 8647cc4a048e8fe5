"""
Consent declaration captured at upload time.

The upload handler sends flags in whatever spelling its form uses
(``sharePhotos``, ``share_photos``, or the Tinder form's ``photos``/``work``).
All spellings map onto the same five categories. Unknown flags are ignored
so that new categories can be added to the form before the pipeline
knows about them.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional

CONSENT_CATEGORIES = [
    "share_photos",
    "share_work_info",
    "share_matches",
    "share_messages",
    "share_prompts",
]

# Accepted spellings -> category
FLAG_ALIASES = {
    "sharePhotos": "share_photos",
    "share_photos": "share_photos",
    "photos": "share_photos",
    "shareWorkInfo": "share_work_info",
    "share_work_info": "share_work_info",
    "work": "share_work_info",
    "shareMatches": "share_matches",
    "share_matches": "share_matches",
    "shareMessages": "share_messages",
    "share_messages": "share_messages",
    "sharePrompts": "share_prompts",
    "share_prompts": "share_prompts",
}


@dataclass(frozen=True)
class ConsentDeclaration:
    """
    User-granted permissions for each category of exported data.

    A False flag means the category is removed from the profile before it
    is persisted. Education is not a category: it is always retained.
    """
    share_photos: bool = True
    share_work_info: bool = True
    share_matches: bool = True
    share_messages: bool = True
    share_prompts: bool = True

    def to_dict(self) -> Dict[str, bool]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(
        cls,
        flags: Dict[str, Any],
        defaults: Optional[Dict[str, bool]] = None
    ) -> "ConsentDeclaration":
        """
        Build a declaration from raw upload flags.

        Args:
            flags: Raw flags from the upload handler (any accepted spelling)
            defaults: Values for categories absent from ``flags``
                (keys in any accepted spelling; missing defaults are True)

        Returns:
            ConsentDeclaration instance
        """
        values = {category: True for category in CONSENT_CATEGORIES}
        for key, value in (defaults or {}).items():
            category = FLAG_ALIASES.get(key)
            if category is not None:
                values[category] = bool(value)

        for key, value in (flags or {}).items():
            category = FLAG_ALIASES.get(key)
            if category is None:
                continue
            values[category] = bool(value)

        return cls(**values)

    @classmethod
    def grant_all(cls) -> "ConsentDeclaration":
        """Declaration that keeps every category."""
        return cls()
