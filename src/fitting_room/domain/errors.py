"""Exceptions raised by fitting room collaborators."""


class FittingRoomError(Exception):
    """Base error for fitting room operations."""


class ProfileAnalysisError(FittingRoomError):
    """Raised when a styling profile cannot be derived from a photo."""


class AvatarSynthesisError(FittingRoomError):
    """Raised when the avatar video job fails or returns nothing."""


class TryOnRenderError(FittingRoomError):
    """Raised when the try-on renderer produces no image."""


class LinkDescriptionError(FittingRoomError):
    """Raised when a product link cannot be described."""


class ImageRelayError(FittingRoomError):
    """Raised when the image relay cannot return image bytes."""


class InvalidPhaseError(FittingRoomError):
    """Raised when an operation is not allowed in the current phase."""
