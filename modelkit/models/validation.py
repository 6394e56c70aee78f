"""
Validation pipeline — gates every create and update.

For each declared property, in declaration order:

1. values that are falsy skip datatype coercion entirely (an empty optional
   field must not fail ``int`` coercion); the ``*`` datatype never coerces;
2. otherwise the datatype coerces the raw value, and a coercion error ends
   that property's validation;
3. then each validator rule runs in declaration order and the first error
   wins.

Per-record failures are collected into ``item.errors`` (one message per
property) and never raised. Unknown datatypes or validators are
configuration errors and are raised as faults.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, NamedTuple, Optional, TYPE_CHECKING

from ..faults import UnknownDatatypeFault, UnknownValidatorFault
from ..utils.strings import camelize
from .datatypes import ANY
from .description import PropertyDescription

if TYPE_CHECKING:
    from .base import ModelItem
    from .registry import ModelRegistry

logger = logging.getLogger("modelkit.models.validation")

__all__ = ["PropertyResult", "ValidationPipeline", "AUDIT_FIELDS"]

AUDIT_FIELDS = ("createdAt", "updatedAt")


class PropertyResult(NamedTuple):
    err: Optional[str]
    val: Any


class ValidationPipeline:
    """Validation and coercion for the models of one registry."""

    def __init__(self, registry: ModelRegistry):
        self._registry = registry

    def normalize_params(self, params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Copy ``params``, camelizing keys when ``force_camel`` is on."""
        if not params:
            return {}
        if not self._registry.config.force_camel:
            return dict(params)
        return {
            camelize(key, leading_underscore=True): value
            for key, value in params.items()
        }

    def validate_and_update_from_params(
        self,
        item: ModelItem,
        params: Optional[Mapping[str, Any]],
        *,
        locale: Optional[str] = None,
        **opts: Any,
    ) -> ModelItem:
        """
        Validate ``params`` against the item's model and write the passing
        values onto ``item``.

        Returns the item; ``item.errors`` is set iff any property failed.
        """
        description = self._registry.description(item.model_name)

        # May be revalidating
        item.errors = None

        working = self.normalize_params(params)

        # Audit fields are only ever carried over from the item itself
        if self._registry.config.use_timestamps:
            for name in AUDIT_FIELDS:
                working.pop(name, None)
                existing = item.__dict__.get(name)
                if existing is not None:
                    working[name] = existing

        errors: Dict[str, str] = {}
        for name, prop in description.properties.items():
            result = self.validate_property(prop, working, locale=locale)
            if result.err:
                errors[name] = result.err
            else:
                setattr(item, name, result.val)

        if errors:
            item.errors = errors
            logger.debug("%s failed validation: %s", item.model_name, errors)

        return item

    def validate_property(
        self,
        prop: PropertyDescription,
        params: Mapping[str, Any],
        *,
        locale: Optional[str] = None,
    ) -> PropertyResult:
        """Coerce and validate one property's value out of ``params``."""
        registry = self._registry
        locale = locale or registry.config.default_locale
        name = prop.name
        val = params.get(name)

        # Only coerce real values -- None would fail ``number`` even when optional
        if val and prop.datatype != ANY:
            datatype = registry.datatypes.get(prop.datatype.lower())
            if datatype is None:
                raise UnknownDatatypeFault(prop.datatype, name)
            result = datatype.validate(name, val, locale, use_utc=registry.config.use_utc)
            if result.err:
                return PropertyResult(result.err, None)
            # Value may have been coerced ("2112" -> 2112, "false" -> False)
            val = result.val

        for condition, rule in prop.validations.items():
            validator = registry.validators.get(condition)
            if not callable(validator):
                raise UnknownValidatorFault(condition, name)
            err = validator(name, val, params, rule, locale)
            if err:
                return PropertyResult(err, None)

        return PropertyResult(None, val)
