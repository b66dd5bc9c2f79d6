"""Chart and release details supplied literally or by a creator function.

A registration field holds either the details themselves (a model or a
mapping) or a creator called with ``(registration, invocation)`` each
time the goal runs. ``detail_source`` classifies the field once so the
executors can resolve both kinds the same way.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel, ValidationError

from helm_goals.integrations.helm.exceptions import ConfigurationError

if TYPE_CHECKING:
    from helm_goals.core.goals.base import GoalInvocation

ModelT = TypeVar("ModelT", bound=BaseModel)

DetailCreator = Callable[[Any, "GoalInvocation"], Any]


def _coerce(value: Any, model: type[ModelT], label: str) -> ModelT:
    if isinstance(value, model):
        return value
    if isinstance(value, Mapping):
        try:
            return model.model_validate(dict(value))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid {label}: {e}") from e
    raise ConfigurationError(f"Unknown registration type for {label}: {type(value).__name__}")


@dataclass(frozen=True)
class Provided:
    """Details given directly in the registration."""

    value: BaseModel

    def resolve(self, registration: Any, invocation: GoalInvocation) -> Any:
        return self.value


@dataclass(frozen=True)
class Computed:
    """Details produced by a creator when the goal runs."""

    creator: DetailCreator
    model: type[BaseModel]
    label: str

    def resolve(self, registration: Any, invocation: GoalInvocation) -> Any:
        return _coerce(self.creator(registration, invocation), self.model, self.label)


DetailSource = Provided | Computed


def detail_source(value: Any, model: type[BaseModel], label: str) -> DetailSource:
    """Classify a registration field as provided or computed details.

    Args:
        value: Model instance, mapping, or creator callable.
        model: Model the details must validate as.
        label: Name used in error messages.

    Raises:
        ConfigurationError: If the value is none of the accepted shapes.
    """
    if isinstance(value, (BaseModel, Mapping)):
        return Provided(_coerce(value, model, label))
    if callable(value):
        return Computed(creator=value, model=model, label=label)
    raise ConfigurationError(f"Unknown registration type for {label}: {type(value).__name__}")


def resolve_details(
    value: Any,
    model: type[ModelT],
    label: str,
    registration: Any,
    invocation: GoalInvocation,
) -> ModelT:
    """Classify and resolve a registration field in one step."""
    resolved: ModelT = detail_source(value, model, label).resolve(registration, invocation)
    return resolved
