"""Default algorithm catalog."""

from plotweave.algorithms.attractor import AttractorAlgorithm
from plotweave.algorithms.base import Algorithm, AlgorithmRegistry
from plotweave.algorithms.boids import BoidsAlgorithm
from plotweave.algorithms.flowfield import FlowfieldAlgorithm
from plotweave.algorithms.grid import GridAlgorithm
from plotweave.algorithms.harmonograph import HarmonographAlgorithm
from plotweave.algorithms.hyphae import HyphaeAlgorithm
from plotweave.algorithms.lissajous import LissajousAlgorithm
from plotweave.algorithms.petalis import PetalisAlgorithm
from plotweave.algorithms.petalis_designer import PetalisDesignerAlgorithm
from plotweave.algorithms.phylla import PhyllaAlgorithm
from plotweave.algorithms.rings import RingsAlgorithm
from plotweave.algorithms.shape_pack import ShapePackAlgorithm
from plotweave.algorithms.spiral import SpiralAlgorithm
from plotweave.algorithms.topo import TopoAlgorithm
from plotweave.algorithms.wavetable import WavetableAlgorithm

DEFAULT_ALGORITHMS: tuple[type[Algorithm], ...] = (
    FlowfieldAlgorithm,
    HyphaeAlgorithm,
    LissajousAlgorithm,
    AttractorAlgorithm,
    HarmonographAlgorithm,
    PhyllaAlgorithm,
    ShapePackAlgorithm,
    PetalisAlgorithm,
    PetalisDesignerAlgorithm,
    RingsAlgorithm,
    SpiralAlgorithm,
    TopoAlgorithm,
    WavetableAlgorithm,
    GridAlgorithm,
    BoidsAlgorithm,
)


def build_default_registry() -> AlgorithmRegistry:
    """Create a fresh registry holding every built-in algorithm.

    Each call returns a new registry; callers that add their own algorithms
    do not affect other registries.
    """
    return AlgorithmRegistry(algorithm() for algorithm in DEFAULT_ALGORITHMS)
