"""Event Photo Gallery Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless event photo gallery using AWS Lambda, S3, DynamoDB and Pillow"
)

__all__ = ["handlers", "core"]
