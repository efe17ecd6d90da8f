"""
Base schemas with standardized field types for consistent API responses.
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict

from ..core.timezone_utils import ensure_utc


class StandardizedModel(BaseModel):  # type: ignore[misc]
    """Base model with standardized JSON encoding"""

    model_config = ConfigDict(use_enum_values=True, populate_by_name=True, from_attributes=True)


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    return ensure_utc(value)


# Instants are always emitted and compared as aware UTC values
UTCDateTime = Annotated[datetime, AfterValidator(_utc)]
