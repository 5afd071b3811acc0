from typing import Literal

from src.core.schemas import Base


class HealthCheckResponse(Base):
    """Returned once the DynamoDB client answers a ping."""

    status: Literal["ok"] = "ok"
