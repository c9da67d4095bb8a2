"""Wizard error taxonomy.

Every failure the wizard can meet while serving one user maps to one of these
classes. The engine decides recovery by type:

- InputMismatch: re-prompt, session untouched
- UpstreamUnavailable: abort the wizard, clear the session, tell the user
- IdentityMissing: generic failure, nothing else happens
- DialogAborted: the step cannot go on for this user (e.g. no resumes)
- PartialRenderFailure: one result could not be delivered, the rest continue

An empty search result is not an error and has no class here.
"""

__all__ = [
    "WizardError",
    "InputMismatch",
    "UpstreamUnavailable",
    "IdentityMissing",
    "DialogAborted",
    "PartialRenderFailure",
]


class WizardError(Exception):
    """Base class for all wizard errors.

    Attributes:
        code: Machine-readable error code (e.g., "UPSTREAM_UNAVAILABLE").
        message: Human-readable error message (for logs, not for users).
        status_code: HTTP status used when the error escapes to the webhook.
    """

    code = "WIZARD_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputMismatch(WizardError):
    """Inbound event does not match what the active step expects.

    Raised for a wrong event kind (text where a button was expected and vice
    versa), a selection token of another step, or blank text.
    """

    code = "INPUT_MISMATCH"
    status_code = 400

    def __init__(self, message: str, reply: str | None = None) -> None:
        """Initialize InputMismatch.

        Args:
            message: What did not match (for logs).
            reply: Re-prompt text to send instead of the step default.
        """
        self.reply = reply
        super().__init__(message)


class UpstreamUnavailable(WizardError):
    """Catalog or search service cannot be reached or answered badly.

    Covers network errors, timeouts, non-2xx responses and malformed bodies.
    """

    code = "UPSTREAM_UNAVAILABLE"
    status_code = 502

    def __init__(self, service: str, message: str) -> None:
        """Initialize UpstreamUnavailable.

        Args:
            service: Name of the failing collaborator ("catalog", "backend").
            message: Error description.
        """
        self.service = service
        super().__init__(f"{service}: {message}")


class IdentityMissing(WizardError):
    """Inbound event carries no user identity."""

    code = "IDENTITY_MISSING"
    status_code = 400

    def __init__(self, message: str = "No user id in inbound event") -> None:
        super().__init__(message)


class PartialRenderFailure(WizardError):
    """A single search result could not be formatted or sent."""

    code = "PARTIAL_RENDER_FAILURE"

    def __init__(self, position: int, message: str) -> None:
        """Initialize PartialRenderFailure.

        Args:
            position: 0-based position of the result in the delivered batch.
            message: Error description.
        """
        self.position = position
        super().__init__(f"result #{position}: {message}")


class DialogAborted(WizardError):
    """The active step cannot continue for this user.

    Used when the upstream answered fine but the user has nothing to choose
    from (no resumes yet). The engine clears the session and sends reply.
    """

    code = "DIALOG_ABORTED"
    status_code = 409

    def __init__(self, message: str, reply: str) -> None:
        """Initialize DialogAborted.

        Args:
            message: Reason (for logs).
            reply: User-facing explanation.
        """
        self.reply = reply
        super().__init__(message)
