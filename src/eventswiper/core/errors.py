"""Domain exceptions shared by the core, adapters and CLI."""


class EventSwiperError(Exception):
    """Base class for all event swiper errors."""

    pass


class ValidationError(EventSwiperError):
    """Raised when an upstream response is malformed."""

    pass


class InvalidPayloadError(ValidationError):
    """Raised when a payload lacks its entities list."""

    pass


class NetworkError(EventSwiperError):
    """Raised when the event source cannot be reached."""

    pass


class StorageError(EventSwiperError):
    """Raised by state stores when a slot cannot be read or written."""

    pass


class FormatError(EventSwiperError):
    """Raised when an event's date/time cannot be resolved for export."""

    pass
