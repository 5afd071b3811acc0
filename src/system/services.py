import logging

import sentry_sdk

from src.core.dynamodb.interface import DynamoDBClientProtocol
from src.core.errors.exceptions import InfrastructureException
from src.system.schemas import HealthCheckResponse


class HealthService:
    def __init__(self, dynamodb: DynamoDBClientProtocol) -> None:
        self.dynamodb = dynamodb
        self.logger = logging.getLogger(__name__)

    async def get_status(self) -> HealthCheckResponse:
        dynamodb_is_ok = await self._check_dynamodb()
        if not dynamodb_is_ok:
            raise InfrastructureException(
                "System health check failed",
                additional_info={"dynamodb": dynamodb_is_ok},
            )
        return HealthCheckResponse(status="ok")

    async def _check_dynamodb(self) -> bool:
        try:
            return bool(await self.dynamodb.ping())
        except Exception as exc:
            self.logger.error("DynamoDB health check failed", exc_info=exc)
            sentry_sdk.capture_exception(exc)
            return False
