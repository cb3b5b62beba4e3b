"""Path writer for saving generated paths as JSON.

The document layout is ``{"paths": [...], "helpers": [...]}`` with optional
``algorithm``, ``seed`` and ``bounds`` entries describing how the paths were
produced. Rendering to SVG or plotter formats is left to consumers.
"""

import json
from pathlib import Path
from typing import Any

from plotweave.domain import Bounds, GenerationResult
from plotweave.exceptions import OutputWriteError


def result_document(
    result: GenerationResult,
    algorithm_id: str | None = None,
    seed: int | None = None,
    bounds: Bounds | None = None,
) -> dict[str, Any]:
    """Build the JSON-ready document for a generation result."""
    document: dict[str, Any] = {}
    if algorithm_id is not None:
        document["algorithm"] = algorithm_id
    if seed is not None:
        document["seed"] = seed
    if bounds is not None:
        document["bounds"] = bounds.to_dict()
    document.update(result.to_dict())
    return document


class PathWriter:
    """Writes generation results as JSON documents.

    Example:
        writer = PathWriter(Path("lissajous-1.json"))
        writer.write(result, algorithm_id="lissajous", seed=1)
    """

    def __init__(self, output_path: Path, indent: int | None = None) -> None:
        """Initialize the path writer.

        Args:
            output_path: Path where the JSON document will be saved
            indent: JSON indentation (compact when None)
        """
        self._output_path = output_path
        self._indent = indent

    @property
    def output_path(self) -> Path:
        return self._output_path

    def dumps(
        self,
        result: GenerationResult,
        algorithm_id: str | None = None,
        seed: int | None = None,
        bounds: Bounds | None = None,
    ) -> str:
        """Serialize without touching the filesystem."""
        return json.dumps(result_document(result, algorithm_id, seed, bounds), indent=self._indent)

    def write(
        self,
        result: GenerationResult,
        algorithm_id: str | None = None,
        seed: int | None = None,
        bounds: Bounds | None = None,
    ) -> int:
        """Write the document and return the number of bytes written.

        Raises:
            OutputWriteError: If the file cannot be written
        """
        text = self.dumps(result, algorithm_id, seed, bounds)
        try:
            self._output_path.parent.mkdir(parents=True, exist_ok=True)
            self._output_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise OutputWriteError(str(self._output_path), str(e)) from e
        return len(text.encode("utf-8"))

    @staticmethod
    def get_output_path(algorithm_id: str, seed: int, directory: Path | None = None) -> Path:
        """Generate the default output path for a generation.

        Converts: ("lissajous", 7) -> lissajous-7.json

        Args:
            algorithm_id: Algorithm id
            seed: Seed used for the generation
            directory: Parent directory (current directory if None)

        Returns:
            Path of the JSON document
        """
        return (directory or Path(".")) / f"{algorithm_id}-{seed}.json"


def read_result(path: Path) -> GenerationResult:
    """Load a document written by ``PathWriter`` back into a result."""
    return GenerationResult.from_dict(json.loads(path.read_text(encoding="utf-8")))
