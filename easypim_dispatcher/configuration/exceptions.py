"""Contains exceptions raised when reconciling application configuration."""


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name} (environment variable {env_name})")
        self.name = name
        self.env_name = env_name


class InvalidOverrideValueError(ValueError):
    """Raised when an execution override holds a value outside its accepted literals."""

    def __init__(self, env_name: str, value: str, accepted: list[str]) -> None:
        """Initializes the exception with the offending variable and value."""
        super().__init__(f"Invalid value {value!r} for {env_name}; expected one of: {', '.join(accepted)}")
        self.env_name = env_name
        self.value = value
        self.accepted = accepted
