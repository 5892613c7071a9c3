"""Base model class for all sybase_dialect models with serialization support."""

from typing import Any, Dict
from pydantic import BaseModel, ConfigDict


class DialectBaseModel(BaseModel):
    """Base model for all request descriptors with built-in serialization.

    Provides common functionality for all models including:
    - Serialization to dictionary via to_dict()
    - Consistent configuration
    - Proper handling of nested models and enums
    """
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert model to dictionary for serialization.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        data = self.model_dump(by_alias=False, exclude_none=True)

        def convert_nested(obj):
            if isinstance(obj, dict):
                return {k: convert_nested(v) for k, v in obj.items()}
            elif isinstance(obj, list):
                return [convert_nested(item) for item in obj]
            elif hasattr(obj, 'value'):  # Handle enums
                return obj.value
            return obj

        return convert_nested(data)
