from fastapi import Depends

from src.core.dynamodb.dependencies import get_dynamodb_client
from src.core.dynamodb.interface import DynamoDBClientProtocol
from src.system.services import HealthService


async def get_health_service(
    dynamodb: DynamoDBClientProtocol = Depends(get_dynamodb_client),
) -> HealthService:
    return HealthService(dynamodb=dynamodb)
