"""
ModelKit Model Registry — descriptions, generated model classes, adapters.

The registry is an explicit object rather than module state: the
definition DSL, the validation pipeline and every generated model class
hold a reference to the registry that created them. Registration is
expected to happen once per model name at startup; afterwards the
registry is read-only apart from adapter wiring.

Usage:
    registry = ModelRegistry(ModelConfig(force_camel=True))
    User = registry.register("User", UserDefinition)
    registry.set_adapter(MemoryAdapter())
"""

from __future__ import annotations

import datetime
import inspect
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Type, Union, TYPE_CHECKING

from ..config import ModelConfig
from ..faults import (
    AdapterNotFoundFault,
    ModelNotFoundFault,
    ModelRegistrationFault,
)
from ..utils.strings import snakeize
from .associations import build_association_methods
from .base import ModelItem
from .datatypes import DEFAULT_DATATYPES, Datatype
from .definition import ModelDefinitionBase
from .description import ModelDescription
from .formatters import DEFAULT_FORMATTERS, FormatterFn
from .validation import ValidationPipeline
from .validators import DEFAULT_VALIDATORS, ValidatorFn

if TYPE_CHECKING:
    from ..adapters.base import Adapter

logger = logging.getLogger("modelkit.models.registry")

__all__ = ["ModelRegistry"]

Definition = Union[type, Callable[[ModelDefinitionBase], Any]]

# Definition members that never reach the generated model
_DEFINITION_ONLY = frozenset({
    "define",
    "__module__",
    "__qualname__",
    "__doc__",
    "__dict__",
    "__weakref__",
    "__slots__",
    "__init__",
    "__new__",
    "__init_subclass__",
    "__getattr__",
    "__annotations__",
    "__wrapped__",
})


def _model_members(namespace: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in namespace.items() if k not in _DEFINITION_ONLY}


class ModelRegistry:
    """
    Central registry for model descriptions and their runtime classes.

    Holds the datatype, validator and formatter tables used by the
    validation pipeline. Each registry starts from copies of the library
    defaults, so extending one registry never leaks into another.
    """

    def __init__(
        self,
        config: Optional[ModelConfig] = None,
        *,
        datatypes: Optional[Mapping[str, Datatype]] = None,
        validators: Optional[Mapping[str, ValidatorFn]] = None,
        formatters: Optional[Mapping[str, FormatterFn]] = None,
    ):
        self.config = config or ModelConfig()
        self.datatypes: Dict[str, Datatype] = dict(DEFAULT_DATATYPES if datatypes is None else datatypes)
        self.validators: Dict[str, ValidatorFn] = dict(DEFAULT_VALIDATORS if validators is None else validators)
        self.formatters: Dict[str, FormatterFn] = dict(DEFAULT_FORMATTERS if formatters is None else formatters)
        self.validator_methods: Dict[str, str] = {}
        self._rebuild_validator_methods()

        self._descriptions: Dict[str, ModelDescription] = {}
        self._models: Dict[str, Type[ModelItem]] = {}
        self._adapters: Dict[str, Adapter] = {}
        self.validation = ValidationPipeline(self)

    # ── Library tables ───────────────────────────────────────────────

    def _rebuild_validator_methods(self) -> None:
        self.validator_methods = {
            f"validates_{snakeize(name)}": name for name in self.validators
        }

    def register_validator(self, name: str, fn: ValidatorFn) -> None:
        """Add a validator; definitions run afterwards get ``validates_<name>``."""
        self.validators[name] = fn
        self._rebuild_validator_methods()

    def register_datatype(self, datatype: Datatype) -> None:
        self.datatypes[datatype.name.lower()] = datatype

    def register_formatter(self, datatype_name: str, fn: FormatterFn) -> None:
        self.formatters[datatype_name.lower()] = fn

    # ── Registration ─────────────────────────────────────────────────

    def register(self, name: str, definition: Definition) -> Type[ModelItem]:
        """
        Run ``definition`` and generate the runtime class for ``name``.

        Args:
            name: Model name, e.g. ``"User"``
            definition: class with a ``define(self)`` method, or a callable
                taking the definition DSL object

        Returns:
            Generated ModelItem subclass

        Raises:
            ModelRegistrationFault: name already registered, or definition
                is neither a class nor callable
        """
        if name in self._models:
            raise ModelRegistrationFault(name, "a model with this name is already registered")

        self._descriptions[name] = ModelDescription(name)
        try:
            namespace = self._run_definition(name, definition)
        except Exception:
            del self._descriptions[name]
            raise

        model_cls = self._generate_model(name, namespace)
        self._models[name] = model_cls
        logger.info(
            "Registered model: %s (%d properties)",
            name, len(self._descriptions[name].properties),
        )
        return model_cls

    def _run_definition(self, name: str, definition: Definition) -> Dict[str, Any]:
        """Execute the definition and return the members it contributes."""
        if inspect.isclass(definition):
            if not callable(getattr(definition, "define", None)):
                raise ModelRegistrationFault(name, "definition class has no define() method")
            if issubclass(definition, ModelDefinitionBase):
                dsl_cls = definition
            else:
                dsl_cls = type(f"{name}Definition", (ModelDefinitionBase, definition), {})
            dsl_cls(name, self).define()

            namespace: Dict[str, Any] = {}
            for klass in reversed(definition.__mro__):
                if klass in ModelDefinitionBase.__mro__:
                    continue
                namespace.update(_model_members(vars(klass)))
            return namespace

        if callable(definition):
            definition(ModelDefinitionBase(name, self))
            # Attributes attached to the function itself
            return _model_members(getattr(definition, "__dict__", {}))

        raise ModelRegistrationFault(name, "definition must be a class or a callable")

    def _generate_model(self, name: str, namespace: Dict[str, Any]) -> Type[ModelItem]:
        """Generate the ModelItem subclass carrying the user's members."""
        description = self._descriptions[name]
        cls_dict: Dict[str, Any] = dict(namespace)
        cls_dict.update({
            "model_name": name,
            "_description": description,
            "_registry": self,
            "_association_methods": build_association_methods(description),
        })
        cls_dict.setdefault("auto_increment_id", False)
        return type(name, (ModelItem,), cls_dict)

    # ── Lookup ───────────────────────────────────────────────────────

    def get_model(self, name: str) -> Optional[Type[ModelItem]]:
        """Get generated model class by name."""
        return self._models.get(name)

    def model(self, name: str) -> Type[ModelItem]:
        """Get generated model class by name, raising if unknown."""
        model_cls = self._models.get(name)
        if model_cls is None:
            raise ModelNotFoundFault(name)
        return model_cls

    def get_description(self, name: str) -> Optional[ModelDescription]:
        return self._descriptions.get(name)

    def description(self, name: str) -> ModelDescription:
        found = self._descriptions.get(name)
        if found is None:
            raise ModelNotFoundFault(name)
        return found

    def all_models(self) -> Dict[str, Type[ModelItem]]:
        """Get all generated model classes."""
        return dict(self._models)

    def __contains__(self, name: object) -> bool:
        return name in self._models

    # ── Adapters ─────────────────────────────────────────────────────

    def set_adapter(self, adapter: Adapter, *model_names: str) -> None:
        """Attach ``adapter`` to the named models, or to every registered model."""
        for name in model_names or tuple(self._models):
            self.model(name)
            self._adapters[name] = adapter
            logger.debug("Adapter %s attached to %s", adapter.name, name)

    def adapter_for(self, name: str) -> Adapter:
        adapter = self._adapters.get(name)
        if adapter is None:
            raise AdapterNotFoundFault(name)
        return adapter

    async def drop_tables(self, *names: str) -> List[str]:
        """Ask each model's adapter to drop its storage; returns dropped names."""
        dropped: List[str] = []
        for name in names or tuple(self._models):
            await self.adapter_for(name).drop_table(name)
            dropped.append(name)
        return dropped

    # ── Item lifecycle ───────────────────────────────────────────────

    def now(self) -> datetime.datetime:
        if self.config.use_utc:
            return datetime.datetime.now(datetime.timezone.utc)
        return datetime.datetime.now()

    def create_item(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
        **opts: Any,
    ) -> ModelItem:
        """Build, validate and stamp a new item, then run ``after_create``."""
        params = params or {}
        item = self.model(name)(params)
        item = self.validation.validate_and_update_from_params(item, params, **opts)

        if self.config.use_timestamps and not item.createdAt:
            item.createdAt = self.now()

        hook = getattr(item, "after_create", None)
        if callable(hook):
            hook()
        return item

    def update_item(
        self,
        item: ModelItem,
        params: Optional[Mapping[str, Any]] = None,
        **opts: Any,
    ) -> ModelItem:
        """Re-validate ``item`` from ``params``, then run ``after_update``."""
        item = self.validation.validate_and_update_from_params(item, params, **opts)

        hook = getattr(item, "after_update", None)
        if callable(hook):
            hook()
        return item
