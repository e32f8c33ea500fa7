"""
Base model for the dashboard wire format

The dashboard speaks camelCase JSON; Python code uses snake_case attributes.
Every domain schema inherits from CamelModel so both spellings are accepted
on input and camelCase is produced on output.
"""
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def json_safe(value):
    """Convert Decimal to float and datetimes to ISO strings, recursively"""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    return value


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # Allow creation from ORM objects
    )

    def to_dict(self, **kwargs) -> dict:
        """camelCase dict ready for JSONResponse"""
        return json_safe(self.model_dump(by_alias=True, **kwargs))
