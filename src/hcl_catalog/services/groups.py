import logging
import random
from threading import Lock
from typing import Any, Dict, List, Optional
from uuid import uuid4

from pydantic import ValidationError

from hcl_catalog.config import settings
from hcl_catalog.data.models import Group
from hcl_catalog.exceptions import GroupError, GroupNotFoundError, LastGroupError
from hcl_catalog.services.catalog import ProductCatalog

logger = logging.getLogger(__name__)


class GroupStore:
    """
    Lightweight in-memory store for user-defined product groups.
    Intended for single-process deployments; clients persist their own copy via dump()/load().
    At least one group always exists.
    """

    def __init__(
        self,
        palette: Optional[List[str]] = None,
        default_name: Optional[str] = None,
        default_os: Optional[str] = None,
    ):
        self.palette = list(palette or settings.groups.palette)
        self.default_name = default_name or settings.groups.default_name
        self.default_os = default_os or settings.groups.default_os
        self._groups: Dict[str, Group] = {}
        self._lock = Lock()
        self.active_id = self._reset()

    def _reset(self) -> str:
        seed = Group(id="g1", name=self.default_name, items=[], os=self.default_os, color=self.palette[0])
        self._groups = {seed.id: seed}
        return seed.id

    def list(self) -> List[Group]:
        with self._lock:
            return list(self._groups.values())

    def get(self, group_id: str) -> Group:
        group = self._groups.get(group_id)
        if group is None:
            raise GroupNotFoundError(f"Group '{group_id}' not found")
        return group

    def create(self, name: Optional[str] = None, os_label: Optional[str] = None) -> Group:
        group = Group(
            id=f"g{uuid4().hex[:10]}",
            name=name or settings.groups.new_group_name,
            items=[],
            os=os_label or self.default_os,
            color=random.choice(self.palette),
        )
        with self._lock:
            self._groups[group.id] = group
        return group

    def update(
        self,
        group_id: str,
        name: Optional[str] = None,
        os_label: Optional[str] = None,
        color: Optional[str] = None,
    ) -> Group:
        with self._lock:
            group = self.get(group_id)
            if color is not None and color not in self.palette:
                raise GroupError(f"Color '{color}' is not in the palette")
            if name is not None:
                group.name = name
            if os_label is not None:
                group.os = os_label
            if color is not None:
                group.color = color
            return group

    def delete(self, group_id: str) -> None:
        with self._lock:
            self.get(group_id)
            if len(self._groups) <= 1:
                raise LastGroupError("At least one group must remain")
            del self._groups[group_id]
            if self.active_id == group_id:
                self.active_id = next(iter(self._groups))

    def add_item(self, group_id: str, model: str, catalog: ProductCatalog) -> Group:
        """Adds a catalog product by model; unknown models and duplicates are ignored."""
        with self._lock:
            group = self.get(group_id)
            if catalog.find_by_model(model) is None:
                logger.info(f"Ignoring unknown model '{model}' for group {group_id}")
                return group
            if model not in group.items:
                group.items.append(model)
            return group

    def remove_item(self, group_id: str, model: str) -> Group:
        with self._lock:
            group = self.get(group_id)
            group.items = [m for m in group.items if m != model]
            return group

    def dump(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [g.model_dump() for g in self._groups.values()]

    def load(self, payload: Any) -> List[Group]:
        """
        Replaces all groups from a previously dumped payload.
        Malformed or empty payloads fall back to the single default group.
        """
        with self._lock:
            try:
                if not isinstance(payload, list) or not payload:
                    raise ValueError("empty group payload")
                groups = [Group.model_validate(self._with_defaults(item)) for item in payload]
            except (ValidationError, ValueError, TypeError) as exc:
                logger.warning(f"Discarding saved groups: {exc}")
                self.active_id = self._reset()
                return list(self._groups.values())
            self._groups = {g.id: g for g in groups}
            self.active_id = groups[0].id
            return list(self._groups.values())

    def _with_defaults(self, item: Any) -> Dict[str, Any]:
        if not isinstance(item, dict):
            raise TypeError("group entry must be an object")
        data = dict(item)
        data["os"] = data.get("os") or self.default_os
        data["color"] = data.get("color") or self.palette[0]
        # Older payloads stored full product objects instead of model keys.
        data["items"] = [i.get("model") if isinstance(i, dict) else i for i in data.get("items") or []]
        return data
