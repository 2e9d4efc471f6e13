"""Config schema for the sweeper simulation."""

REQUIRED_PARAMS: dict[str, type] = {}

DEFAULTS = {
    # neural network
    "num_inputs": 4,
    "num_outputs": 2,
    "num_hidden_layers": 1,
    "neurons_per_hidden_layer": 6,
    "activation_response": 1.0,
    "bias": -1.0,
    # sweepers
    "max_turn_rate": 0.3,
    "max_speed": 2.0,
    "num_sweepers": 30,
    "num_targets": 40,
    "ticks_per_generation": 2000,
    # genetic algorithm
    "crossover_rate": 0.7,
    "mutation_rate": 0.1,
    "max_perturbation": 0.3,
    "elite_count": 4,
    "elite_copies": 1,
    # world
    "arena_width": 400.0,
    "arena_height": 400.0,
    "target_capture_scale": 2.0,
    # run control
    "generations": 100,
    "seed": 0,
}

OPTIONAL_PARAMS = {
    "num_inputs": int,
    "num_outputs": int,
    "num_hidden_layers": int,
    "neurons_per_hidden_layer": int,
    "activation_response": float,
    "bias": float,
    "max_turn_rate": float,
    "max_speed": float,
    "num_sweepers": int,
    "num_targets": int,
    "ticks_per_generation": int,
    "crossover_rate": float,
    "mutation_rate": float,
    "max_perturbation": float,
    "elite_count": int,
    "elite_copies": int,
    "arena_width": float,
    "arena_height": float,
    "target_capture_scale": float,
    "generations": int,
    "seed": int,
}
