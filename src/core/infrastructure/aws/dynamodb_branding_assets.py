"""DynamoDB-backed implementation of BrandingAssetRepository.

Table layout: partition key ``asset_name`` (S), binary ``data`` attribute.
"""

from aws_lambda_powertools import Logger
from boto3.dynamodb.types import Binary
from botocore.exceptions import ClientError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter
from core.repositories.branding_repository import BrandingAssetRepository

logger = Logger(utc=True)

ASSET_KEY = "asset_name"
ASSET_DATA = "data"


class DynamoDBBrandingAssets(BrandingAssetRepository):
    """Logo lookup backed by a DynamoDB table."""

    def __init__(self, adapter: DynamoDBAdapter) -> None:
        self._db = adapter

    @classmethod
    def for_table(cls, table_name: str) -> "DynamoDBBrandingAssets":
        return cls(DynamoDBAdapter(table_name))

    def get_asset(self, name: str) -> bytes | None:
        try:
            response = self._db.get_item(key={ASSET_KEY: name})
        except ClientError:
            logger.exception("Branding asset lookup failed", extra={"asset": name})
            raise

        item = response.get("Item")
        if not item or ASSET_DATA not in item:
            return None

        data = item[ASSET_DATA]
        return data.value if isinstance(data, Binary) else bytes(data)

    def put_asset(self, name: str, data: bytes) -> None:
        """Store or replace an asset."""
        self._db.put_item(item={ASSET_KEY: name, ASSET_DATA: Binary(data)})
        logger.info("Branding asset stored", extra={"asset": name, "size": len(data)})
