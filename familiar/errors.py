"""Exception hierarchy for the agent runtime."""


class FamiliarError(Exception):
    """Base class for all agent errors."""


class StorageError(FamiliarError):
    """The conversation store failed to read or write durably."""


class InferenceError(FamiliarError):
    """Base class for inference engine failures."""


class InferenceUnavailableError(InferenceError):
    """The inference engine could not be initialized. Permanent for the process."""


class GenerationFailedError(InferenceError):
    """A single generation failed. Only the current turn is affected."""


class DispatchError(FamiliarError):
    """Base class for tool dispatch failures."""


class ToolNotFoundError(DispatchError):
    """No tool is registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Tool not found: {name}")
        self.name = name


class ToolExecutionError(DispatchError):
    """A registered tool rejected its arguments or failed while running."""

    def __init__(self, name: str, detail: str):
        super().__init__(detail)
        self.name = name
        self.detail = detail


class ConfigurationError(FamiliarError):
    """The runtime was wired incorrectly at startup."""


class DuplicateToolError(ConfigurationError):
    """A tool name was registered twice."""

    def __init__(self, name: str):
        super().__init__(f"Tool already registered: {name}")
        self.name = name


class RegistryFrozenError(ConfigurationError):
    """A tool was registered after the registry was frozen."""


class InputRejectedError(FamiliarError):
    """User input was refused before anything was persisted."""
