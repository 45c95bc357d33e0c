#!/usr/bin/env python3
"""
Load the two watermark logos into the branding assets table.

Run:
    BRANDING_ASSETS_TABLE_NAME=branding-assets \
    python seed/seed_branding_assets.py \
      --bbff-logo ./assets/bbff-logo.png \
      --hmb-logo ./assets/hmb-logo.png
"""

import argparse
import os
from pathlib import Path
import sys

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_branding_assets import DynamoDBBrandingAssets
from core.utils.config import validate_environment
from core.utils.constants import BBFF_LOGO_ASSET, ENV_BRANDING_ASSETS_TABLE_NAME, HMB_LOGO_ASSET

logger = Logger(service="seed")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upload watermark logos")

    parser.add_argument("--bbff-logo", type=Path, required=True, help="Top-left logo (PNG)")
    parser.add_argument("--hmb-logo", type=Path, required=True, help="Bottom-right logo (PNG)")

    return parser.parse_args()


def seed_branding_assets() -> None:
    try:
        args = parse_args()
        validate_environment(os.environ, (ENV_BRANDING_ASSETS_TABLE_NAME,))

        assets = DynamoDBBrandingAssets.for_table(os.environ[ENV_BRANDING_ASSETS_TABLE_NAME])

        for name, path in ((BBFF_LOGO_ASSET, args.bbff_logo), (HMB_LOGO_ASSET, args.hmb_logo)):
            assets.put_asset(name, path.read_bytes())

        logger.info("Branding assets seeded")

    except Exception as exc:
        logger.exception("Seeding branding assets failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_branding_assets()
