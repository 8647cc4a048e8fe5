"""
Upload runner for the profile pipeline.

This is the single entrypoint for processing a dating-app data export.

Usage:
    python -m profile_pipeline.run --export data.json --consent consent.yaml
    python -m profile_pipeline.run --export user.json --export matches.json \\
        --export prompts.json --export media.json --store-dir artifacts/profiles

The pipeline performs the following steps:
1. Load the export file(s)
2. Normalize the vendor export into a NormalizedProfile
3. Remove the categories the user did not consent to share
4. Merge with the previously stored profile of the same account, if any
5. Recompute derived statistics and save
"""

import argparse
import logging
import sys
from typing import Any, Dict, Optional, Union

from .aggregation import aggregate_usage, attach_stats
from .configs import load_config, validate_config, PipelineConfig
from .consent import apply_consent
from .data_loading import load_export_files, load_consent_file
from .errors import ProfilePipelineError, ProfileNotFoundError
from .merging import merge_profiles
from .normalization import normalize
from .schema import ConsentDeclaration, NormalizedProfile
from .storage import ProfileStore, InMemoryProfileStore, JoblibProfileStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def create_store(config: PipelineConfig, store_dir: Optional[str] = None) -> ProfileStore:
    """
    Build the configured profile store.

    Args:
        config: Pipeline configuration
        store_dir: If provided, use a joblib store in this directory
            regardless of the configured backend

    Returns:
        ProfileStore instance
    """
    if store_dir:
        return JoblibProfileStore(store_dir)
    if config.storage_backend == "joblib":
        if not config.storage_path:
            raise ValueError("storage.path is required for the joblib backend")
        return JoblibProfileStore(config.storage_path)
    return InMemoryProfileStore()


def process_upload(
    raw: Any,
    consent: Union[ConsentDeclaration, Dict[str, Any]],
    store: ProfileStore,
    config: Optional[PipelineConfig] = None
) -> NormalizedProfile:
    """
    Normalize, filter, merge and save one uploaded export.

    Consent is applied before anything is read from or written to the
    store. When a profile with the same id is already stored, the upload
    is merged into it as the newer export. The load-merge-save sequence
    holds the store's lock for that profile id.

    Args:
        raw: Raw vendor export (optionally wrapped by the upload handler)
        consent: Consent declaration or raw consent flags
        store: Profile store
        config: Pipeline configuration (defaults if None)

    Returns:
        The profile as saved, with ``meta`` set

    Raises:
        UnrecognizedFormatError: If the export is not a Tinder or Hinge export
        MalformedFieldError: If a structural field is mis-shaped
    """
    config = config or PipelineConfig()

    profile = normalize(raw)
    profile = apply_consent(profile, consent, defaults=config.consent_defaults)

    with store.lock_for(profile.profile_id):
        prior = store.load_profile(profile.profile_id)
        if prior is None:
            logger.info(f"New {profile.platform.value} profile")
            result = attach_stats(profile)
        else:
            logger.info(f"Merging upload into existing {profile.platform.value} profile")
            result = merge_profiles(prior, profile)
        store.save_profile(result)

    return result


def merge_stored_profiles(store: ProfileStore, old_id: str, new_id: str) -> NormalizedProfile:
    """
    Merge two stored profiles of the same person into ``new_id``.

    Used when a user recreated their account and uploaded both exports.
    The merged profile replaces ``new_id`` and ``old_id`` is deleted.

    Args:
        store: Profile store
        old_id: Id of the older account's profile
        new_id: Id of the newer account's profile

    Returns:
        The merged profile

    Raises:
        ValueError: If both ids are the same
        ProfileNotFoundError: If either profile is not stored
        PlatformMismatchError: If the profiles come from different platforms
    """
    if old_id == new_id:
        raise ValueError("Cannot merge a profile with itself")

    first_id, second_id = sorted([old_id, new_id])
    with store.lock_for(first_id), store.lock_for(second_id):
        old = store.load_profile(old_id)
        if old is None:
            raise ProfileNotFoundError(old_id)
        new = store.load_profile(new_id)
        if new is None:
            raise ProfileNotFoundError(new_id)

        merged = merge_profiles(old, new)
        store.save_profile(merged)
        store.delete_profile(old_id)

    logger.info("Merged stored profiles")
    return merged


def main():
    """Main entry point for the upload pipeline."""
    parser = argparse.ArgumentParser(
        description="Normalize a Tinder or Hinge data export and store the profile"
    )
    parser.add_argument(
        "--export",
        type=str,
        action="append",
        required=True,
        help="Export file; repeat for the separate Hinge files"
    )
    parser.add_argument(
        "--consent",
        type=str,
        default=None,
        help="YAML file with consent flags (missing flags take the configured defaults)"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--store-dir",
        type=str,
        default=None,
        help="Directory for the joblib profile store (overrides config)"
    )

    args = parser.parse_args()

    try:
        if args.config:
            raw_config = load_config(args.config)
            for issue in validate_config(raw_config):
                logger.warning(f"Config issue: {issue}")
            config = PipelineConfig.from_config(raw_config)
        else:
            config = PipelineConfig()
        setup_logging(config.log_level)

        raw = load_export_files(args.export)
        flags = load_consent_file(args.consent) if args.consent else {}
        store = create_store(config, args.store_dir)

        profile = process_upload(raw, flags, store, config)
        logger.info(f"Stored profile {profile.profile_id[:12]}...\n{profile.meta.summary()}")
        rollup = aggregate_usage(profile.usage, config.default_granularity)
        if not rollup.empty:
            logger.info(f"Usage by {config.default_granularity} period:\n{rollup.to_string(index=False)}")
        return 0
    except ProfilePipelineError as e:
        logger.debug(f"Rejected upload detail: {e}")
        logger.error(f"Upload rejected: {e.user_message}")
        return 1
    except Exception as e:
        logger.exception(f"Pipeline failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
