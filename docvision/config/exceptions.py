class ConfigurationError(Exception):
    """Raised when a required external-service setting or credential is missing."""
