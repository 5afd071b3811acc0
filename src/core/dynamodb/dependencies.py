from typing import cast

from fastapi import Request

from src.core.dynamodb.interface import DynamoDBClientProtocol


async def get_dynamodb_client(request: Request) -> DynamoDBClientProtocol:
    """
    Provide the process-wide DynamoDB client stored on app.state.
    """
    client = getattr(request.app.state, "dynamodb", None)
    if client is None:
        raise RuntimeError(
            "DynamoDB client is not initialized. Ensure startup lifecycle ran."
        )
    return cast(DynamoDBClientProtocol, client)
