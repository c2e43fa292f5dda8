from typing import Dict, ClassVar, Type
from tx_router.utils.logger import logger
from tx_router.utils.exceptions import UnsupportedTypeError
from tx_router.reporters.base import Reporter


class ReporterFactory:
    """
    Factory for creating Reporter implementations.

    This class provides a registry-based factory pattern for creating instances
    of Reporter implementations based on a specified type. New reporter types can
    be registered with the factory to make them available for creation.
    """

    REGISTRY: ClassVar[Dict[str, Type[Reporter]]] = {}

    @classmethod
    def register_reporter(cls, name: str, reporter_class: Type[Reporter]) -> None:
        """
        Register a reporter implementation.

        Args:
            name (str): The name to register the reporter type under.
            reporter_class (Type[Reporter]): The reporter class to register.
        """
        cls.REGISTRY[name.lower()] = reporter_class

    @classmethod
    def create(cls, reporter_type: str, **kwargs) -> Reporter:
        """
        Create a Reporter implementation based on requested type.

        Args:
            reporter_type (str): The type of reporter to create.
            **kwargs: Configuration parameters to pass to the reporter.

        Returns:
            Reporter: An initialized Reporter implementation.

        Raises:
            UnsupportedTypeError: If the requested reporter type is not supported.
        """
        normalized_type = reporter_type.lower()
        logger.debug(f"Creating reporter of type: {normalized_type}")

        if normalized_type not in cls.REGISTRY:
            supported = list(cls.REGISTRY.keys())
            logger.error(
                f"Unsupported reporter type: {reporter_type}. Supported types: {supported}"
            )
            raise UnsupportedTypeError(
                f"Unsupported reporter type: {reporter_type}. Supported types: {supported}"
            )

        reporter_class = cls.REGISTRY[normalized_type]
        return reporter_class(**kwargs)
