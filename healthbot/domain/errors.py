"""Error taxonomy for the health bot core."""


class HealthBotError(Exception):
    """Base class for all health bot errors."""


class ProfileDecodeError(HealthBotError):
    """Stored profile data could not be decoded into health conditions."""


class CatalogValidationError(HealthBotError):
    """A catalog entry is missing or carries malformed nutrient data."""


class ConfigurationError(HealthBotError):
    """A catalog or registry references an unknown trigger, category or enum value."""
