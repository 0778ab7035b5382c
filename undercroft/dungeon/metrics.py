from typing import Dict


def init_metrics() -> Dict[str, int | float | bool | dict]:
    return {
        'rooms_target': 0,
        'rooms_placed': 0,
        'placement_attempts': 0,
        'candidate_source': 'none',
        'candidate_edges': 0,
        'tree_edges': 0,
        'extra_edges': 0,
        'edges_carved': 0,
        'edges_skipped': 0,
        'search_successes': 0,
        'search_retries': 0,
        'fallback_paths': 0,
        'connection_success_ratio': 1.0,
        'dead_ends_pruned': 0,
        'components_initial': 0,
        'components_final': 0,
        'forced_bridges': 0,
        'emergency_links': 0,
        'floor_cells': 0,
        'runtime_ms': 0,
    }
