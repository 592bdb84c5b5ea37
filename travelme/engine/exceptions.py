"""Engine exceptions."""


class TravelmeError(Exception):
    """Base exception for planning engine errors."""
    pass


class NoPlacesForCityError(TravelmeError):
    """Raised when no catalog places are available for the requested city."""

    def __init__(self, city: str):
        super().__init__(f"No places found for {city}")
        self.city = city


class SynthesisError(TravelmeError):
    """Raised when every synthesis model failed to produce a usable plan."""
    pass


class CatalogUnavailableError(TravelmeError):
    """Raised by catalog sources when the store cannot be read."""
    pass
