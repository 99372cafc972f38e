from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

import networkx as nx
import numpy as np
import tsplib95


@dataclass
class Instance:
    name: str
    path: Path
    graph: nx.Graph
    distances: np.ndarray
    optimum: Optional[float]

    @property
    def dimension(self) -> int:
        return self.distances.shape[0]


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _read_dimension(path: Path) -> Optional[int]:
    with path.open("r") as f:
        for line in f:
            if "DIMENSION" in line.upper():
                for token in line.replace(":", " ").split():
                    if token.isdigit():
                        return int(token)
    return None


def _load_optimum(problem, path: Path) -> Optional[float]:
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        tour_file = tsplib95.parse(candidate.read_text())
        nodes = list(tour_file.tours[0])
        dist = 0.0
        for i in range(len(nodes)):
            dist += problem.get_weight(nodes[i], nodes[(i + 1) % len(nodes)])
        return float(dist)
    return None


def distance_matrix(graph: nx.Graph) -> np.ndarray:
    """Dense matrix in sorted node order; self loops are zeroed."""
    nodes = sorted(graph.nodes())
    mat = nx.to_numpy_array(graph, nodelist=nodes, weight="weight", dtype=float)
    np.fill_diagonal(mat, 0.0)
    return mat


def distance_matrix_from_coordinates(coords, rounded: bool = False) -> np.ndarray:
    """Euclidean distances between ``(x, y)`` points, optionally rounded to ints."""
    points = np.asarray(coords, dtype=float)
    diff = points[:, None, :] - points[None, :, :]
    mat = np.sqrt((diff ** 2).sum(axis=-1))
    if rounded:
        mat = np.floor(mat + 0.5)
    return mat


def load_instance(path: Path) -> Instance:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"TSPLIB instance not found: {path}")
    problem = tsplib95.load(path)
    graph = problem.get_graph()
    return Instance(
        name=problem.name or path.stem,
        path=path,
        graph=graph,
        distances=distance_matrix(graph),
        optimum=_load_optimum(problem, path),
    )


def load_tsplib_instances(
    root: Path, max_nodes: Optional[int] = None, max_instances: Optional[int] = None
) -> List[Instance]:
    tsp_files = sorted(Path(root).glob("*.tsp"))
    instances: List[Instance] = []
    for p in tsp_files:
        if max_nodes is not None:
            dim = _read_dimension(p)
            if dim is not None and dim > max_nodes:
                continue
        instances.append(load_instance(p))
        if max_instances is not None and len(instances) >= max_instances:
            break
    return instances
