"""
Text reports: one block per reported generation, plus the configuration summary.
"""


def population_report(population, generation):
    lines = ["", "Initial population" if generation == 0 else f"Generation: {generation}",
             "merit   \tscaled  \tsubset"]
    for particle in population.particles:
        lines.append(f"{abs(particle.objective):8.5f}\t{particle.fitness:8.5f}\t"
                     f"{particle.position.to_string()}")
    return "\n".join(lines) + "\n"


def config_summary(config, starting=None):
    """`starting`: resolved start set, or None when no start set is in effect."""
    start = "no attributes" if starting is None else config.start_set_spec()
    return (
        "\tPSO Search.\n"
        f"\tStart set: {start}\n"
        f"\tPopulation size: {config.population_size}\n"
        f"\tNumber of iterations: {config.iterations}\n"
        f"\tMutation probability: {config.mutation_probability}\n"
        f"\tInertia weight: {config.inertia_weight}\n"
        f"\tSocial weight: {config.social_weight}\n"
        f"\tIndividual weight: {config.individual_weight}\n"
        f"\tReport frequency: {config.effective_report_frequency}\n"
        f"\tSeed: {config.seed}\n"
    )
