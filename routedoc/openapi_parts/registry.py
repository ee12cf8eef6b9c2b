"""Component registry and reference resolution for one document build.

Bodies and responses reference their schemas by name instead of inlining
them. `ComponentRegistry.name_for` picks that name:

  1. same node object seen before -> same name
  2. compiled shape seen before -> that shape's name
  3. otherwise the node's label, which must be present and must not already
     name a different shape

The registry is mutable and must not be shared between builds.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from ..errors import LabelConflictError, MissingLabelError, NoSchemaProvided
from .compiler import BuildContext, Compiled, Components, compile_node
from .constants import COMPONENT_BUCKETS
from .helpers import canonical, ref_name

logger = logging.getLogger(__name__)


class ComponentRegistry:
    def __init__(self):
        self.components: Components = {bucket: {} for bucket in COMPONENT_BUCKETS}
        self.by_identity: Dict[int, str] = {}
        self.by_shape: Dict[str, str] = {}
        # identity keys stay valid only while their nodes are alive
        self._pinned: List[Any] = []

    @property
    def schemas(self) -> Dict[str, Any]:
        return self.components["schemas"]

    @property
    def parameters(self) -> Dict[str, Any]:
        return self.components["parameters"]

    def _bind(self, node: Any, name: str) -> None:
        self.by_identity[id(node)] = name
        self._pinned.append(node)

    def compile(self, node: Any) -> Compiled:
        """Compile against the registered components and keep whatever the walk registers."""
        ctx = BuildContext(known=self.components)
        schema = compile_node(node, ctx)
        self.merge(ctx.created)
        return schema

    def merge(self, created: Components) -> None:
        for bucket, entries in created.items():
            target = self.components.setdefault(bucket, {})
            for name, schema in entries.items():
                existing = target.get(name)
                if existing is None:
                    target[name] = schema
                elif canonical(existing) != canonical(schema):
                    raise LabelConflictError(name, bucket)

    def declare(self, name: str, node: Any) -> Optional[Any]:
        """Register a pre-declared schema under its explicit name."""
        schema = self.compile(node)
        if schema is False:
            logger.debug("Skipping forbidden schema %s", name)
            return None
        self.schemas[name] = schema
        self._bind(node, name)
        self.by_shape[canonical(schema)] = name
        return schema

    def register_parameter(self, name: str, parameter: Dict[str, Any]) -> None:
        self.parameters[name] = parameter

    def name_for(self, node: Any) -> str:
        if id(node) in self.by_identity:
            return self.by_identity[id(node)]

        schema = self.compile(node)
        if schema is False:
            raise NoSchemaProvided('A forbidden schema cannot be used as a body or response.')

        target = ref_name(schema)
        if target is not None:
            self._bind(node, target)
            return target

        shape = canonical(schema)
        if shape in self.by_shape:
            name = self.by_shape[shape]
            self._bind(node, name)
            label = schema.get("title") if isinstance(schema, dict) else None
            if label and label != name:
                logger.debug("Label %s not published; identical shape already registered as %s", label, name)
            else:
                logger.debug("Reusing schema %s for identical shape", name)
            return name

        name = schema.get("title") if isinstance(schema, dict) else None
        if not name:
            raise MissingLabelError()

        existing = self.schemas.get(name)
        if existing is not None:
            if canonical(existing) != shape:
                raise LabelConflictError(name)
            self._bind(node, name)
            self.by_shape[shape] = name
            return name

        self.schemas[name] = {k: v for k, v in schema.items() if k != "title"}
        self._bind(node, name)
        self.by_shape[shape] = name
        logger.debug("Registered schema %s", name)
        return name


__all__ = ["ComponentRegistry"]
