"""
Consent filtering.

Removes every category of data the user declined to share. The filter is
applied once, before anything is persisted, and cannot be undone: data
removed here is never stored.
"""

import copy
import dataclasses
import logging
from typing import Any, Dict, Optional, Union

from ..aggregation import attach_stats
from ..schema import ConsentDeclaration, NormalizedProfile, WorkInfo

logger = logging.getLogger(__name__)


def apply_consent(
    profile: NormalizedProfile,
    consent: Union[ConsentDeclaration, Dict[str, Any]],
    defaults: Optional[Dict[str, bool]] = None
) -> NormalizedProfile:
    """
    Return a copy of ``profile`` without the categories consent withholds.

    - share_photos=False: ``media`` emptied
    - share_work_info=False: job title, workplaces and their displayed
      flags cleared together
    - share_matches=False: ``matches`` emptied
    - share_messages=False: every match kept, with no messages
    - share_prompts=False: ``prompts`` emptied

    Education fields are always kept. The input profile is not modified
    and shares no records with the result. Applying the same declaration
    twice gives the same result.

    Args:
        profile: Normalized profile
        consent: Declaration, or raw upload flags in any accepted spelling
        defaults: Values for flags absent from raw upload flags

    Returns:
        Filtered profile; ``meta`` is recomputed if the input had one
    """
    if not isinstance(consent, ConsentDeclaration):
        consent = ConsentDeclaration.from_dict(consent, defaults=defaults)
    profile = copy.deepcopy(profile)

    identity = profile.identity
    if not consent.share_work_info:
        identity = dataclasses.replace(identity, work=WorkInfo())

    if not consent.share_matches:
        matches = []
    elif not consent.share_messages:
        matches = [dataclasses.replace(match, messages=[]) for match in profile.matches]
    else:
        matches = profile.matches

    filtered = dataclasses.replace(
        profile,
        identity=identity,
        matches=matches,
        media=profile.media if consent.share_photos else [],
        prompts=profile.prompts if consent.share_prompts else []
    )

    withheld = [category for category, granted in consent.to_dict().items() if not granted]
    if withheld:
        logger.info(f"Consent withheld for: {', '.join(withheld)}")

    if profile.meta is not None:
        filtered = attach_stats(filtered)
    return filtered
