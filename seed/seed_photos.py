#!/usr/bin/env python3
"""
Seed script to upload sample event photos through the upload API.

Run:
    python seed/seed_photos.py \
      --base-url http://localhost:4566/restapis/<API-ID>/snd/_user_request_ \
      --photos-dir ./sample-photos \
      --upload-token dev-upload-token
"""

import argparse
import mimetypes
from pathlib import Path
import sys
from typing import Any, cast

from aws_lambda_powertools import Logger
import requests
from requests_toolbelt import MultipartEncoder

from core.utils.constants import HEADER_UPLOAD_TOKEN, MAX_FILES_PER_UPLOAD, UPLOAD_FORM_FIELD

logger = Logger(service="seed")

PHOTO_SUFFIXES = (".jpg", ".jpeg", ".png", ".webp")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed event photos via the upload API")

    parser.add_argument(
        "--base-url",
        required=True,
        help="API base URL; /api/upload and /api/list are appended",
    )
    parser.add_argument(
        "--photos-dir",
        type=Path,
        required=True,
        help="Directory of .jpg/.png/.webp files to upload",
    )
    parser.add_argument(
        "--upload-token",
        default="dev-upload-token",
        help="Value for the X-Upload-Token header",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Maximum number of photos to upload",
    )

    return parser.parse_args()


def find_photos(directory: Path, limit: int) -> list[Path]:
    photos = sorted(p for p in directory.iterdir() if p.suffix.lower() in PHOTO_SUFFIXES)
    return photos[:limit]


def upload_batch(url: str, token: str, batch: list[Path]) -> requests.Response:
    fields = [
        (
            UPLOAD_FORM_FIELD,
            (path.name, path.read_bytes(), mimetypes.guess_type(path.name)[0] or "image/jpeg"),
        )
        for path in batch
    ]
    encoder = MultipartEncoder(fields=fields)

    return requests.post(
        url,
        data=encoder,
        headers={"Content-Type": encoder.content_type, HEADER_UPLOAD_TOKEN: token},
        timeout=60,
    )


def seed_photos() -> None:
    try:
        args = parse_args()
        base_url = args.base_url.rstrip("/")
        upload_url = f"{base_url}/api/upload"

        photos = find_photos(args.photos_dir, args.limit)
        if not photos:
            logger.warning("No photos found", extra={"photos_dir": str(args.photos_dir)})
            return

        logger.info(
            "Starting seeding process",
            extra={"upload_url": upload_url, "count": len(photos)},
        )

        for start in range(0, len(photos), MAX_FILES_PER_UPLOAD):
            batch = photos[start : start + MAX_FILES_PER_UPLOAD]
            response = upload_batch(upload_url, args.upload_token, batch)
            response_json = cast(dict[str, Any], response.json())

            if response.status_code in (201, 206):
                logger.info(
                    "Seeded batch",
                    extra={
                        "status": response.status_code,
                        "stored": len(response_json.get("photos", [])),
                        "errors": response_json.get("errors", []),
                    },
                )
            else:
                logger.error(
                    "Failed to seed batch",
                    extra={
                        "files": [path.name for path in batch],
                        "status": response.status_code,
                        "response": response_json,
                    },
                )

        logger.info("Seeding completed")

        list_response = requests.get(f"{base_url}/api/list", params={"limit": 10}, timeout=30)
        logger.info(
            "List photos response",
            extra={
                "status": list_response.status_code,
                "response": list_response.json() if list_response.ok else list_response.text,
            },
        )

    except Exception as exc:
        logger.exception("Seeding failed", exc_info=exc)
        sys.exit(1)


if __name__ == "__main__":
    seed_photos()
