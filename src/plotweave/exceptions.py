"""Exception hierarchy for plotweave."""


class PlotweaveError(Exception):
    """Base exception for all plotweave errors."""

    pass


class AlgorithmError(PlotweaveError):
    """Errors related to the algorithm catalog."""

    pass


class UnknownAlgorithmError(AlgorithmError):
    """Requested algorithm id is not registered."""

    def __init__(self, algorithm_id: str, known: list[str] | None = None) -> None:
        self.algorithm_id = algorithm_id
        self.known = known or []
        message = f"Unknown algorithm '{algorithm_id}'"
        if self.known:
            message += f" (known: {', '.join(self.known)})"
        super().__init__(message)


class DuplicateAlgorithmError(AlgorithmError):
    """An algorithm id was registered twice."""

    def __init__(self, algorithm_id: str) -> None:
        self.algorithm_id = algorithm_id
        super().__init__(f"Algorithm '{algorithm_id}' is already registered")


class GeometryError(PlotweaveError):
    """Errors in geometric calculations."""

    pass


class DegenerateGeometryError(GeometryError):
    """Geometry too degenerate for the requested operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ImageSourceError(PlotweaveError):
    """Errors related to image noise sources."""

    pass


class ImageNotFoundError(ImageSourceError):
    """Image id not present in the image store."""

    def __init__(self, image_id: str) -> None:
        self.image_id = image_id
        super().__init__(f"Image '{image_id}' not found")


class PresetError(PlotweaveError):
    """Errors related to parameter presets and output files."""

    pass


class PresetLoadError(PresetError):
    """Error loading a parameter preset file."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load preset '{path}': {reason}")


class OutputWriteError(PresetError):
    """Error writing generated paths."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write output '{path}': {reason}")
