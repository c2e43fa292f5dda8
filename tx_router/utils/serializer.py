from typing import Any
import json
from tx_router.utils.logger import logger


class Serializer:
    """
    Utility class for serializing routed reports to JSON-compatible formats.

    Reports are turned into plain dicts first (anything exposing ``to_dict``),
    then round-tripped through JSON with a string fallback for values such as
    exceptions or datetimes that JSON cannot represent directly.
    """

    def serialize(self, data: Any) -> Any:
        """
        Serialize data to a JSON-compatible format.

        Args:
            data (Any): The data to serialize. Objects with a ``to_dict`` method
                are converted through it.

        Returns:
            Any: The serialized data, either as a JSON-compatible structure or a string.
        """
        if hasattr(data, "to_dict"):
            data = data.to_dict()

        try:
            return json.loads(json.dumps(data, default=str))
        except (TypeError, ValueError) as e:
            logger.debug(
                f"Serialization exception: {e}, converting entire object to string"
            )
            return str(data)

    def dumps(self, data: Any) -> str:
        """Serialize data straight to a JSON string."""
        return json.dumps(self.serialize(data))
