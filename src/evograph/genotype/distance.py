"""
Genomic Distance Module.

Functions:
    distance: NEAT compatibility distance between two networks
"""

from typing import TYPE_CHECKING

from evograph.genotype.crossover import connection_genes

if TYPE_CHECKING:
    from evograph.network    import Network
    from evograph.run.config import Config

def distance(network_a: 'Network', network_b: 'Network', config: 'Config') -> float:
    """
    Calculate the genetic distance between two networks using the original NEAT formula.

    The formula only looks at connections, aligned by innovation id:
        distance = (c1 * E / N) + (c2 * D / N) + c3 * W̄

    Where:
    - E = number of excess connection genes
    - D = number of disjoint connection genes
    - N = number of connection genes in the larger network
    - W̄ = average weight difference of matching connection genes
    - c1, c2, c3 = distance coefficients (section [SPECIATION])

    Parameters:
        network_a: First network
        network_b: Second network
        config:    Stores the distance coefficients

    Returns:
        the NEAT distance between the two networks
    """
    genes_a = connection_genes(network_a)
    genes_b = connection_genes(network_b)
    innovs1 = set(genes_a.keys())
    innovs2 = set(genes_b.keys())
    if not innovs1 and not innovs2:
        return 0.0

    matching_innovs     =  innovs1 & innovs2
    non_matching_innovs = (innovs1 | innovs2) - matching_innovs

    max_innov1 = max(innovs1) if innovs1 else -1
    max_innov2 = max(innovs2) if innovs2 else -1

    # Excess genes lie beyond the smaller genome's max innovation id
    num_excess   = 0
    num_disjoint = 0
    for innov in non_matching_innovs:
        if innov > min(max_innov1, max_innov2):
            num_excess += 1
        else:
            num_disjoint += 1

    avg_weight_diff = 0.0
    if matching_innovs:
        weight_diff     = sum(abs(genes_a[i]["weight"] - genes_b[i]["weight"]) for i in matching_innovs)
        avg_weight_diff = weight_diff / len(matching_innovs)

    N = max(len(genes_a), len(genes_b))
    return (config.distance_excess_coeff   * num_excess   / N +
            config.distance_disjoint_coeff * num_disjoint / N +
            config.distance_weight_coeff   * avg_weight_diff)
