import logging

from fastapi import FastAPI

from src.core.dynamodb.adapter import DynamoDBAdapter
from src.main.config import AWSConfig

logger = logging.getLogger("dynamodb")


def create_dynamodb_adapter(aws: AWSConfig) -> DynamoDBAdapter:
    return DynamoDBAdapter(
        region=aws.REGION_NAME,
        access_key=aws.AWS_ACCESS_KEY_ID,
        secret_key=aws.AWS_SECRET_ACCESS_KEY,
        endpoint_url=aws.DYNAMODB_ENDPOINT_URL,
        max_attempts=aws.AWS_MAX_ATTEMPTS,
    )


async def on_dynamodb_startup(app: FastAPI, aws: AWSConfig) -> None:
    """
    Open one DynamoDB client for the process and attach it to app.state for DI access.
    """
    adapter = create_dynamodb_adapter(aws)
    await adapter.__aenter__()
    app.state.dynamodb = adapter
    logger.info("DynamoDB client created for region %s.", aws.REGION_NAME)


async def on_dynamodb_shutdown(app: FastAPI) -> None:
    adapter = getattr(app.state, "dynamodb", None)
    if adapter:
        logger.info("Closing DynamoDB client...")
        await adapter.close()
        app.state.dynamodb = None
        logger.info("DynamoDB client closed.")
