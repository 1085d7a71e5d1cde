"""Domain-specific errors for plantlink."""


class PlantlinkError(Exception):
    """Base error for plantlink."""


class ChannelError(PlantlinkError):
    """Base cloud property channel error."""


class ChannelConnectError(ChannelError):
    """Raised when the property channel cannot be established. Fatal for the bridge."""


class ChannelPublishError(ChannelError):
    """Raised when a property value cannot be published."""


class AdvisoryError(PlantlinkError):
    """Raised when the advisory backend cannot be reached or answers with an unexpected shape."""


class AdvisoryParseError(AdvisoryError):
    """Raised when advisory text is not the expected JSON record."""


class ValidationError(PlantlinkError):
    """Raised when a care instruction record fails type validation."""

    def __init__(self, message: str, fields: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.fields = fields
