"""
Unified exception hierarchy for the storecheck harness.

Every harness-specific failure derives from HarnessError so callers can
catch all of them with a single except clause. The subclasses follow the
harness error taxonomy:

- environment-not-ready errors (DeploymentNotReady) are expected during
  cold starts and tolerated explicitly by scenarios
- assertion-style failures (ScenarioError) are always surfaced
- fixture lifecycle problems are never raised at all; they are reported
  through CleanupResult or logged by teardown
"""

from typing import Any


class HarnessError(Exception):
    """
    Base exception for all storecheck errors.

    Example:
        try:
            db.start()
        except HarnessError as e:
            lg.error("harness failure", extra={"exception": e})
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(HarnessError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found
        - Invalid YAML syntax
        - Value rejected by schema validation
    """

    pass


class DatabaseError(HarnessError):
    """
    Database-related errors.

    Examples:
        - Ephemeral database could not be provisioned
        - Connection failed
        - Session requested on a closed connection
    """

    pass


class DeploymentNotReady(HarnessError):
    """
    The deployment under test is not ready yet.

    Raised for connection refused / timeouts and 503 responses while a
    deployment is still starting. Scenarios treat this as an accepted state.
    """

    pass


class ScenarioError(HarnessError):
    """
    A scenario observed an outcome it does not recognise.

    Examples:
        - Navigation returned neither 200 nor 503
        - Shop page shows neither products nor the empty-state message
    """

    pass
