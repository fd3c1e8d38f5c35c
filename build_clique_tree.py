"""
Build clique trees for DIMACS CNF formulas.

Usage:
    python build_clique_tree.py input=path/to/formula.cnf
    python build_clique_tree.py input=data/cnf ordering=natural output=cliques.pt
"""

from pathlib import Path
from typing import List, Optional
import logging

import hydra
import torch
from hydra.utils import to_absolute_path
from omegaconf import DictConfig, OmegaConf
from torch_geometric.data import Data
from tqdm import tqdm

from cliquetree.preprocessing.dimacs import cnf_to_factors, parse_dimacs
from cliquetree.preprocessing.graph_builder import (
    build_clique_graph,
    clique_graph_to_pyg,
    cnf_to_clique_tree,
    verify_clique_tree,
)

logger = logging.getLogger(__name__)


def collect_inputs(input_path: Path, max_files: Optional[int] = None) -> List[Path]:
    """Return the CNF files to process for a file or directory input."""
    if not input_path.exists():
        raise FileNotFoundError(f"Input not found: {input_path}")
    if input_path.is_file():
        return [input_path]

    files = sorted(input_path.rglob("*.cnf"))
    if max_files:
        files = files[:max_files]
    return files


def process_file(cnf_file: Path, cfg: DictConfig) -> Data:
    """Build, optionally verify, and export the clique tree of one CNF file."""
    cnf = parse_dimacs(cnf_file)
    tree = cnf_to_clique_tree(cnf, cfg.ordering)
    graph = build_clique_graph(tree)

    if cfg.get('verify', True):
        is_valid, errors = verify_clique_tree(graph, cnf_to_factors(cnf))
        if not is_valid:
            logger.warning(f"{cnf_file.name}: invalid clique tree: {errors[:3]}")

    largest = max((len(keys) for keys in graph.frontal_keys), default=0)
    logger.info(
        f"{cnf_file.name}: {cnf.num_variables} variables, {cnf.num_clauses} clauses -> "
        f"{graph.num_cliques} cliques in {len(tree.roots)} trees, "
        f"largest clique {largest} frontals, "
        f"max problem size {max(graph.problem_sizes, default=0)}"
    )
    return clique_graph_to_pyg(graph)


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig):
    """Main entry point."""
    logger.info(f"Configuration:\n{OmegaConf.to_yaml(cfg)}")

    input_path = Path(to_absolute_path(cfg.input))
    files = collect_inputs(input_path, cfg.get('max_files'))
    if not files:
        logger.warning(f"No CNF files found under {input_path}")
        return

    data_list = []
    if len(files) == 1:
        data_list.append(process_file(files[0], cfg))
    else:
        for cnf_file in tqdm(files, desc="Building clique trees"):
            try:
                data_list.append(process_file(cnf_file, cfg))
            except Exception as e:
                logger.warning(f"Failed to process {cnf_file}: {e}")

    if cfg.get('output'):
        output_path = Path(to_absolute_path(cfg.output))
        output_path.parent.mkdir(parents=True, exist_ok=True)
        torch.save(data_list, output_path)
        logger.info(f"Saved {len(data_list)} clique graphs to {output_path}")

    return data_list


if __name__ == '__main__':
    main()
