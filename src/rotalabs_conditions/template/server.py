"""Server-side template evaluation.

A ``ServerTemplate`` caches template data and evaluates it into a
``ServerConfig`` for one evaluation context: conditions are evaluated in
template order, and each parameter takes the value of the first true
condition that has a conditional value for it, else its default value.
"""

import logging
import threading
from typing import Any, Dict, Mapping, Optional, Union

from rotalabs_conditions.core.context import EvaluationContext
from rotalabs_conditions.evaluation.evaluator import ConditionEvaluator
from rotalabs_conditions.template.data import ServerTemplateData
from rotalabs_conditions.template.values import ServerConfig, Value, ValueSource

logger = logging.getLogger(__name__)


class ServerTemplate:
    """Holds a server template and evaluates it into a ServerConfig.

    Attributes:
        _cache: Current template data, or None until one is set.
        _stringified_default_config: In-app defaults, stored as strings.
        _evaluator: Shared condition evaluator.
        _lock: Guards the cached template.
    """

    def __init__(
        self,
        default_config: Optional[Mapping[str, Any]] = None,
        template_data: Optional[ServerTemplateData] = None,
        evaluator: Optional[ConditionEvaluator] = None,
    ):
        """Initialize server template.

        Args:
            default_config: In-app defaults used when the template has no
                value for a key or defers to the in-app default.
            template_data: Optional template data to cache immediately.
            evaluator: Condition evaluator (a default one is created).
        """
        self._cache: Optional[ServerTemplateData] = template_data
        self._evaluator = evaluator or ConditionEvaluator()
        self._lock = threading.RLock()

        # Remote Config stores every value as a string.
        self._stringified_default_config: Dict[str, str] = {}
        if default_config is not None:
            for key, value in default_config.items():
                self._stringified_default_config[key] = str(value)

    def set(self, template_data_json: str) -> None:
        """Cache the template described by a JSON string.

        Raises:
            ValueError: If the template data is invalid.
        """
        self.set_template_data(ServerTemplateData.from_json(template_data_json))

    def set_template_data(self, template_data: ServerTemplateData) -> None:
        """Cache already-parsed template data."""
        with self._lock:
            self._cache = template_data
        logger.debug(
            "Server template cached",
            extra={"etag": template_data.etag, "condition_count": len(template_data.conditions)}
        )

    def evaluate(self, context: Union[EvaluationContext, Mapping[str, Any], None] = None) -> ServerConfig:
        """Evaluate the cached template for a context.

        Args:
            context: Signals and randomization id for condition evaluation.

        Returns:
            Evaluated config.

        Raises:
            ValueError: If no template has been set.
        """
        with self._lock:
            template = self._cache
        if template is None:
            raise ValueError("No Remote Config server template in cache. Call set() before evaluate().")

        config_values: Dict[str, Value] = {
            key: Value(ValueSource.DEFAULT, value)
            for key, value in self._stringified_default_config.items()
        }

        evaluated_conditions = self._evaluator.evaluate_conditions(template.conditions, context)

        for key, parameter in template.parameters.items():
            parameter_value = None
            # Conditions are checked in template order; first true one wins.
            for condition_name, matched in evaluated_conditions.items():
                if matched and condition_name in parameter.conditional_values:
                    parameter_value = parameter.conditional_values[condition_name]
                    break

            # A null value counts as no value at all.
            if parameter_value is None or parameter_value.is_empty:
                parameter_value = parameter.default_value

            if parameter_value is None or parameter_value.is_empty:
                logger.warning("No default value found for parameter", extra={"parameter": key})
                continue

            if parameter_value.use_in_app_default:
                logger.debug("Using in-app default value", extra={"parameter": key})
                continue

            config_values[key] = Value(ValueSource.REMOTE, parameter_value.value)

        return ServerConfig(config_values=config_values)

    def to_json(self) -> str:
        """Serialize the cached template for later use with ``set``.

        Raises:
            ValueError: If no template has been set.
        """
        with self._lock:
            template = self._cache
        if template is None:
            raise ValueError("No Remote Config server template in cache. Call set() before to_json().")
        return template.to_json()


def init_server_template(
    default_config: Optional[Mapping[str, Any]] = None,
    template_data_json: Optional[str] = None,
) -> ServerTemplate:
    """Create a ServerTemplate, optionally caching a JSON template.

    Args:
        default_config: In-app defaults.
        template_data_json: Optional template JSON to cache on creation.

    Returns:
        New server template.
    """
    template = ServerTemplate(default_config=default_config)
    if template_data_json is not None:
        template.set(template_data_json)
    return template
