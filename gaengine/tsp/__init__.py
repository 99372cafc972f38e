from .events import TSPEventHandlerCSV, TSPEventHandlerGenerationTracker, TSPEventHandlerLogging
from .fitness import TSPChromosomeValidator, TSPFitnessFunction
from .mutation import TSPMutationGreedy, TSPMutationGreedyBeginning, greedy_order
from .population import TSPPopulationCreatorRandom
from .runner import TSPRunConfig, TSPRunner

__all__ = [
    "TSPChromosomeValidator",
    "TSPEventHandlerCSV",
    "TSPEventHandlerGenerationTracker",
    "TSPEventHandlerLogging",
    "TSPFitnessFunction",
    "TSPMutationGreedy",
    "TSPMutationGreedyBeginning",
    "TSPPopulationCreatorRandom",
    "TSPRunConfig",
    "TSPRunner",
    "greedy_order",
]
