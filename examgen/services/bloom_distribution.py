import math
from fractions import Fraction
from typing import Dict, Union

from ..models.bloom import BloomLevel, DistributionPolicy


# Share of the requested question count per level, in percent.
DISTRIBUTION_TABLES: Dict[DistributionPolicy, Dict[BloomLevel, int]] = {
    DistributionPolicy.BALANCED: {
        BloomLevel.REMEMBER: 20,
        BloomLevel.UNDERSTAND: 20,
        BloomLevel.APPLY: 20,
        BloomLevel.ANALYZE: 15,
        BloomLevel.EVALUATE: 15,
        BloomLevel.CREATE: 10,
    },
    DistributionPolicy.FOUNDATIONAL: {
        BloomLevel.REMEMBER: 40,
        BloomLevel.UNDERSTAND: 30,
        BloomLevel.APPLY: 20,
        BloomLevel.ANALYZE: 10,
        BloomLevel.EVALUATE: 0,
        BloomLevel.CREATE: 0,
    },
    DistributionPolicy.ADVANCED: {
        BloomLevel.REMEMBER: 10,
        BloomLevel.UNDERSTAND: 15,
        BloomLevel.APPLY: 20,
        BloomLevel.ANALYZE: 25,
        BloomLevel.EVALUATE: 20,
        BloomLevel.CREATE: 10,
    },
}


def calculate_distribution(
    policy: Union[DistributionPolicy, str, None],
    total_questions: int,
) -> Dict[BloomLevel, int]:
    """
    Per-level question counts for a policy, in Bloom order.

    Each level is rounded up independently, so the counts may add up to more
    than total_questions. Callers that need an exact total truncate.
    """
    table = DISTRIBUTION_TABLES[DistributionPolicy.coerce(policy)]
    total = max(int(total_questions or 0), 0)
    return {
        level: math.ceil(Fraction(total * percent, 100))
        for level, percent in table.items()
    }
