"""
Render order for SceneForge.

Unselected entities are painted first in their z-order, the current
selection last so it sits on top.
"""

from typing import List, Optional, Sequence

from ..core.entity import Entity
from ..core.group import Group


def compose_render_order(objects: Sequence[Entity],
                         active_group: Optional[Group] = None,
                         active_object: Optional[Entity] = None) -> List[Entity]:
    """
    Order entities for painting without touching any of them.

    Args:
        objects: Surface entities in z-order
        active_group: Current multi-selection; its members are painted through it
        active_object: Current single selection, ignored when a group is active

    Returns:
        New list: unselected entities, then the group or the active entity
    """
    if active_group is not None:
        ordered = [obj for obj in objects if not active_group.contains(obj)]
        ordered.append(active_group)
        return ordered

    if active_object is not None and active_object in objects:
        ordered = [obj for obj in objects if obj is not active_object]
        ordered.append(active_object)
        return ordered

    return list(objects)
