"""
Error taxonomy for the adventure runtime.

All of these are recoverable: the component that detects one logs it and
skips the action instead of halting the session.
"""

from __future__ import annotations


class AdventureError(RuntimeError):
    """Base class for recoverable runtime errors."""


class LoadFailed(AdventureError):
    """A loader backend did not produce the asset for an address."""

    def __init__(self, address: str, cause: BaseException | None = None):
        self.address = address
        self.cause = cause
        message = f"Failed to load asset at address: {address}"
        if cause is not None:
            message += f" ({cause})"
        super().__init__(message)


class UnknownScene(AdventureError):
    """Navigation target is not in the scene graph."""

    def __init__(self, scene_id: str):
        self.scene_id = scene_id
        super().__init__(f"Scene not found in database: {scene_id}")


class TransitionRejected(AdventureError):
    """A scene transition was requested while another one is running."""

    def __init__(self, scene_id: str, active_scene_id: str | None = None):
        self.scene_id = scene_id
        self.active_scene_id = active_scene_id
        super().__init__(
            f"Transition to {scene_id} rejected: a transition is already in progress"
        )


class MalformedParameter(AdventureError):
    """A command parameter does not have the shape its handler expects."""

    def __init__(self, command_type: str, parameter: str, reason: str = ""):
        self.command_type = command_type
        self.parameter = parameter
        message = f"Malformed {command_type} parameter: {parameter!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class AssetNotFound(LookupError):
    """
    Raised by a loader backend that has no asset for an address.

    Fallback chains move on to the next backend on this error only.
    """

    def __init__(self, address: str):
        self.address = address
        super().__init__(address)
