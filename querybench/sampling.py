"""Host subset sampling.

Sampling returns bare host indices; rendering them as filter strings is
left to the dialect generators.
"""

import numpy as np

from querybench.errors import HostSampleError


def sample_hosts(scale_var: int, k: int, rng: np.random.Generator) -> list[int]:
    """Choose k distinct host indices uniformly from [0, scale_var).

    Equivalent to taking the first k elements of a random permutation of
    the fleet, so the returned order is random as well.

    Args:
        scale_var: Number of simulated hosts in the fleet
        k: Number of hosts to pick
        rng: Random generator owned by the caller

    Returns:
        List of k distinct indices

    Raises:
        HostSampleError: If k or scale_var is negative, or k > scale_var
    """
    if scale_var < 0:
        raise HostSampleError(f"bad scale var: {scale_var}")
    if k < 0:
        raise HostSampleError(f"cannot sample a negative number of hosts: {k}")
    if k == 0:
        return []
    if k > scale_var:
        raise HostSampleError(f"requested {k} hosts but the fleet only has {scale_var}")
    return [int(n) for n in rng.choice(scale_var, size=k, replace=False)]


def hostname(index: int) -> str:
    return f"host_{index}"


def host_tag(index: int) -> str:
    """Tag filter for one host, e.g. 'hostname=host_7'."""
    return f"hostname={hostname(index)}"
