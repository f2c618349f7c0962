"""Exception types raised by the classification pipeline."""


class PipelineError(Exception):
    """Base class for fatal pipeline errors."""


class ConfigurationError(PipelineError):
    """Raised when the module configuration or parser dump cannot be used."""


class PolicyViolationError(PipelineError):
    """Raised when a module policy names a declaration missing from the tree."""

    def __init__(self, module: str, name: str, stage: str) -> None:
        """Record the offending module, declaration and stage."""
        self.module = module
        self.name = name
        self.stage = stage
        super().__init__(
            f"[{stage}] module '{module}': expected declaration '{name}' "
            "was not found in the parsed tree"
        )


class PipelineOrderError(PipelineError):
    """Raised when a pass runs before the stage it depends on."""


class CollaboratorError(PipelineError):
    """Raised when an external tool (parser, qmake, make) fails."""

    def __init__(self, tool: str, returncode: int) -> None:
        """Record the failing tool and its exit status."""
        self.tool = tool
        self.returncode = returncode
        super().__init__(f"{tool} failed with exit status {returncode}")
