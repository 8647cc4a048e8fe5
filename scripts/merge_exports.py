"""
Merge two exports of the same person offline.

Normalizes both exports, applies the consent flags (if given), merges the
older profile with the newer one and writes the result as JSON.

Usage:
    python scripts/merge_exports.py --old tinder_2022.json --new tinder_2024.json \\
        --output merged.json [--consent consent.yaml]

Hinge exports made of several files can be passed as multiple paths:
    python scripts/merge_exports.py --old old/user.json old/matches.json \\
        --new new/user.json new/matches.json --output merged.json
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def print_stats(title, profile):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)
    print(profile.meta.summary())


def main():
    """Merge two exports and write the merged profile."""
    from profile_pipeline.aggregation import attach_stats
    from profile_pipeline.consent import apply_consent
    from profile_pipeline.data_loading import load_export_files, load_consent_file
    from profile_pipeline.errors import ProfilePipelineError
    from profile_pipeline.merging import merge_profiles
    from profile_pipeline.normalization import normalize

    parser = argparse.ArgumentParser(description="Merge two dating-app exports of the same person")
    parser.add_argument("--old", nargs="+", required=True, help="Older export file(s)")
    parser.add_argument("--new", nargs="+", required=True, help="Newer export file(s)")
    parser.add_argument("--output", type=str, required=True, help="Where to write the merged profile JSON")
    parser.add_argument("--consent", type=str, default=None, help="YAML file with consent flags")
    args = parser.parse_args()

    try:
        flags = load_consent_file(args.consent) if args.consent else {}
        old = attach_stats(apply_consent(normalize(load_export_files(args.old)), flags))
        new = attach_stats(apply_consent(normalize(load_export_files(args.new)), flags))

        print_stats("OLD EXPORT", old)
        print_stats("NEW EXPORT", new)

        merged = merge_profiles(old, new)
        print_stats("MERGED", merged)
    except ProfilePipelineError as e:
        logger.error(f"Merge failed: {e.user_message} ({e})")
        return 1

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(merged.to_dict(), f, indent=2)
    logger.info(f"Wrote merged profile to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
