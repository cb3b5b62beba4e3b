"""Petalis variant locked to two rings and the designer profile."""

from plotweave.algorithms.petalis import PetalisAlgorithm
from plotweave.config.params import PetalisParams, PetalProfile, RingMode


class PetalisDesignerAlgorithm(PetalisAlgorithm):
    """Same composition as petalis; ring mode and profile are not configurable."""

    id = "petalisDesigner"
    label = "Petalis Designer"
    description = "Dual-ring petals drawn from the designer profile"

    def prepare(self, params: PetalisParams) -> PetalisParams:
        return params.model_copy(
            update={
                "ring_mode": RingMode.DUAL,
                "petal_profile": PetalProfile.DESIGNER,
                "center_profile": PetalProfile.DESIGNER,
            }
        )
