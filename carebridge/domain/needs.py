# SPDX-License-Identifier: Apache-2.0

"""
Need domain logic: priority ordering, write payloads and statistics.
"""

from typing import Any, Dict, Iterable, List, Optional

from carebridge.models.dtos import NeedDto
from carebridge.models.entities import Need, NeedsStatistics
from carebridge.models.enums import NeedPriority, NeedStatus


def sort_by_priority(needs: Iterable[Need], descending: bool = True) -> List[Need]:
    """
    Order needs by priority weight.

    The sort is stable, so needs of equal priority keep the order the store
    returned them in.
    """
    return sorted(needs, key=lambda need: need.priority.rank, reverse=descending)


def build_need_insert(
    orphanage_id: str,
    category_id: str,
    item_name: str,
    quantity: int,
    priority: NeedPriority,
    description: str,
) -> Dict[str, Any]:
    """Insert payload for a new active need."""
    return {
        "orphanage_id": orphanage_id,
        "category_id": category_id,
        "item_name": item_name,
        "quantity": quantity,
        "priority": NeedPriority(priority).value,
        "description": description,
        "status": NeedStatus.ACTIVE.value,
    }


def build_need_update(
    item_name: Optional[str] = None,
    quantity: Optional[int] = None,
    priority: Optional[NeedPriority] = None,
    description: Optional[str] = None,
) -> Dict[str, Any]:
    """Partial update payload; only given values are included."""
    updates: Dict[str, Any] = {}
    if item_name is not None:
        updates["item_name"] = item_name
    if quantity is not None:
        updates["quantity"] = quantity
    if priority is not None:
        updates["priority"] = NeedPriority(priority).value
    if description is not None:
        updates["description"] = description
    return updates


def compute_needs_statistics(needs: Iterable[NeedDto]) -> NeedsStatistics:
    """Summarize need rows for an orphanage dashboard."""
    needs = list(needs)
    active = [n for n in needs if n.status == NeedStatus.ACTIVE.value]
    return NeedsStatistics(
        total_needs=len(needs),
        active_needs=len(active),
        fulfilled_needs=sum(1 for n in needs if n.status == NeedStatus.FULFILLED.value),
        cancelled_needs=sum(1 for n in needs if n.status == NeedStatus.CANCELLED.value),
        urgent_needs=sum(1 for n in active if n.priority.upper() == NeedPriority.URGENT.value),
        high_priority_needs=sum(1 for n in active if n.priority.upper() == NeedPriority.HIGH.value),
    )
