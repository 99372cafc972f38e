class InvariantViolation(RuntimeError):
    """A collaborator broke a run invariant (population size, chromosome validity)."""
