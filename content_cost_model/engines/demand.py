# content_cost_model/engines/demand.py
"""
Work demand aggregation: walks the content tree and sums effort hours into
role buckets according to a demand mapping table.
"""

import logging
from typing import Dict, Iterable, Sequence

from content_cost_model.config.models import (
    DEFAULT_DEMAND_MAPPING,
    Chapter,
    DemandRule,
    Subsection,
    walk_subsections,
)

logger = logging.getLogger(__name__)


def empty_demand(mapping: Sequence[DemandRule] = DEFAULT_DEMAND_MAPPING) -> Dict[str, float]:
    """Every role named by ``mapping`` at zero hours, in mapping order."""
    return {rule.role: 0.0 for rule in mapping}


def _rule_applies(rule: DemandRule, subsection: Subsection) -> bool:
    return rule.complexity is None or rule.complexity == subsection.complexity


def aggregate_demand(
    chapters: Iterable[Chapter],
    mapping: Sequence[DemandRule] = DEFAULT_DEMAND_MAPPING,
) -> Dict[str, float]:
    """Sum the effort of every subsection into the role buckets of ``mapping``.

    With the default mapping editor and researcher hours go 1:1 to Editor and
    Researcher, and all review hours go to Specialist Reviewer whatever the
    complexity tier. Roles outside the mapping never receive demand.

    Args:
        chapters: The content tree.
        mapping: Demand rules; each routes ``share`` of one effort field to a role.

    Returns:
        Mapping of role name to total demand hours. An empty tree yields all zeros.
    """
    demand = empty_demand(mapping)
    subsection_count = 0
    for subsection in walk_subsections(tuple(chapters)):
        subsection_count += 1
        for rule in mapping:
            if _rule_applies(rule, subsection):
                demand[rule.role] += rule.share * subsection.effort(rule.effort_field)

    logger.debug(f"Aggregated demand over {subsection_count} subsections: {demand}")
    return demand
