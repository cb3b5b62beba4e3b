"""Algorithm contract and registry.

An algorithm turns a parameter model, a seeded random source, a noise field
and canvas bounds into paths. Each algorithm declares the pydantic model its
parameters resolve to; missing keys take defaults and out-of-range values are
clamped, so the only hard failure is asking the registry for an unknown id.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, ClassVar, Generic, TypeVar

from plotweave.config.params import AlgorithmParams
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, GenerationResult, Path
from plotweave.exceptions import DuplicateAlgorithmError, UnknownAlgorithmError

P = TypeVar("P", bound=AlgorithmParams)


class Algorithm(ABC, Generic[P]):
    """A named path generator.

    Subclasses set ``id``, ``label`` and ``params_model`` and implement
    ``generate`` and ``formula``.
    """

    id: ClassVar[str]
    label: ClassVar[str]
    description: ClassVar[str] = ""
    params_model: ClassVar[type[AlgorithmParams]] = AlgorithmParams

    def resolve_params(self, params: Mapping[str, Any] | AlgorithmParams | None = None) -> P:
        """Build the parameter model from a flat mapping (camelCase or snake_case)."""
        if isinstance(params, self.params_model):
            return params  # type: ignore[return-value]
        if isinstance(params, AlgorithmParams):
            params = params.model_dump()
        return self.params_model.model_validate(dict(params or {}))  # type: ignore[return-value]

    @abstractmethod
    def generate(self, params: P, rng: SeededRng, noise: NoiseField, bounds: Bounds) -> GenerationResult:
        """Produce paths for ``params`` inside ``bounds``."""

    @abstractmethod
    def formula(self, params: P) -> str:
        """Human-readable summary of the math behind the output."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


def result(paths: Iterable[Path], helpers: Iterable[Path] = ()) -> GenerationResult:
    return GenerationResult(paths=list(paths), helpers=list(helpers))


class AlgorithmRegistry:
    """Mapping from stable algorithm id to algorithm instance."""

    def __init__(self, algorithms: Iterable[Algorithm] = ()) -> None:
        self._algorithms: dict[str, Algorithm] = {}
        for algorithm in algorithms:
            self.register(algorithm)

    def register(self, algorithm: Algorithm) -> None:
        """Add an algorithm.

        Raises:
            DuplicateAlgorithmError: If the id is already registered
        """
        if algorithm.id in self._algorithms:
            raise DuplicateAlgorithmError(algorithm.id)
        self._algorithms[algorithm.id] = algorithm

    def get(self, algorithm_id: str) -> Algorithm:
        """Look up an algorithm by id.

        Raises:
            UnknownAlgorithmError: If no algorithm has this id
        """
        try:
            return self._algorithms[algorithm_id]
        except KeyError:
            raise UnknownAlgorithmError(algorithm_id, self.ids()) from None

    def ids(self) -> list[str]:
        return sorted(self._algorithms)

    def __contains__(self, algorithm_id: object) -> bool:
        return algorithm_id in self._algorithms

    def __iter__(self) -> Iterator[Algorithm]:
        return iter(self._algorithms.values())

    def __len__(self) -> int:
        return len(self._algorithms)
