"""Server template data: parameters, conditions and metadata.

This module defines the template schema consumed by ``ServerTemplate``:
named conditions plus parameters whose values may be overridden per
condition. Templates load from dictionaries, JSON strings or JSON/YAML
files.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from rotalabs_conditions.core.config import NamedCondition

try:
    import yaml

    YAML_AVAILABLE = True
except ImportError:
    YAML_AVAILABLE = False


@dataclass
class ParameterValue:
    """A parameter value, or a marker to use the in-app default.

    Attributes:
        value: String value served to clients.
        use_in_app_default: Defer to the caller's default config.
    """

    value: Optional[str] = None
    use_in_app_default: bool = False

    @property
    def is_empty(self) -> bool:
        """True if there is neither a value nor an in-app default marker."""
        return self.value is None and not self.use_in_app_default

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameter value to dictionary."""
        if self.use_in_app_default:
            return {"useInAppDefault": True}
        return {"value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterValue":
        """Create parameter value from dictionary."""
        value = data.get("value")
        return cls(
            value=str(value) if value is not None else None,
            use_in_app_default=bool(data.get("useInAppDefault", False)),
        )


@dataclass
class RemoteConfigParameter:
    """A template parameter.

    Attributes:
        default_value: Value used when no conditional value applies.
        conditional_values: Values keyed by condition name.
        description: Free-form description.
        value_type: Declared type (STRING, BOOLEAN, NUMBER, JSON).
    """

    default_value: Optional[ParameterValue] = None
    conditional_values: Dict[str, ParameterValue] = field(default_factory=dict)
    description: Optional[str] = None
    value_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameter to dictionary."""
        result: Dict[str, Any] = {}
        if self.default_value is not None:
            result["defaultValue"] = self.default_value.to_dict()
        if self.conditional_values:
            result["conditionalValues"] = {
                name: value.to_dict() for name, value in self.conditional_values.items()
            }
        if self.description is not None:
            result["description"] = self.description
        if self.value_type is not None:
            result["valueType"] = self.value_type
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RemoteConfigParameter":
        """Create parameter from dictionary."""
        default_value = data.get("defaultValue")
        conditional_values = data.get("conditionalValues") or {}

        return cls(
            default_value=ParameterValue.from_dict(default_value) if default_value else None,
            conditional_values={
                name: ParameterValue.from_dict(value)
                for name, value in conditional_values.items()
            },
            description=data.get("description"),
            value_type=data.get("valueType"),
        )


@dataclass
class ServerTemplateData:
    """Parsed server template.

    Attributes:
        conditions: Named conditions, in evaluation order.
        parameters: Parameters keyed by name.
        version: Opaque template version metadata.
        etag: Template ETag, if known.
    """

    conditions: List[NamedCondition] = field(default_factory=list)
    parameters: Dict[str, RemoteConfigParameter] = field(default_factory=dict)
    version: Optional[Any] = None
    etag: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert template data to dictionary."""
        result: Dict[str, Any] = {
            "conditions": [c.to_dict() for c in self.conditions],
            "parameters": {name: p.to_dict() for name, p in self.parameters.items()},
        }
        if self.version is not None:
            result["version"] = self.version
        if self.etag:
            result["etag"] = self.etag
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ServerTemplateData":
        """Create template data from dictionary.

        Raises:
            ValueError: If data is not a dictionary, or parameters or
                conditions are present but null.
        """
        if not isinstance(data, dict):
            raise ValueError("Remote Config template data must be an object")

        parameters: Dict[str, RemoteConfigParameter] = {}
        if "parameters" in data:
            if data["parameters"] is None:
                raise ValueError("Remote Config parameters must be a non-null object")
            parameters = {
                name: RemoteConfigParameter.from_dict(p) for name, p in data["parameters"].items()
            }

        conditions: List[NamedCondition] = []
        if "conditions" in data:
            if data["conditions"] is None:
                raise ValueError("Remote Config conditions must be a non-null object")
            conditions = [NamedCondition.from_dict(c) for c in data["conditions"]]

        etag = data.get("etag")

        return cls(
            conditions=conditions,
            parameters=parameters,
            version=data.get("version"),
            etag=etag if isinstance(etag, str) else "",
        )

    @classmethod
    def from_json(cls, template_data_json: str) -> "ServerTemplateData":
        """Create template data from a JSON string."""
        return cls.from_dict(json.loads(template_data_json))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ServerTemplateData":
        """Load template data from JSON or YAML file.

        Args:
            path: Path to template file (.json or .yaml/.yml).

        Returns:
            Loaded template data.

        Raises:
            ValueError: If file format is unsupported.
            ImportError: If YAML file provided but PyYAML not installed.
        """
        path = Path(path)
        suffix = path.suffix.lower()

        with open(path, "r", encoding="utf-8") as f:
            if suffix == ".json":
                data = json.load(f)
            elif suffix in (".yaml", ".yml"):
                if not YAML_AVAILABLE:
                    raise ImportError("PyYAML is required to load YAML files. Install with: pip install pyyaml")
                data = yaml.safe_load(f)
            else:
                raise ValueError(f"Unsupported file format: {suffix}. Use .json, .yaml, or .yml")

        return cls.from_dict(data)

    def to_json(self, indent: Optional[int] = None) -> str:
        """Convert template data to JSON string.

        Args:
            indent: JSON indentation level.

        Returns:
            JSON representation of template.
        """
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        """Convert template data to YAML string.

        Raises:
            ImportError: If PyYAML is not installed.
        """
        if not YAML_AVAILABLE:
            raise ImportError("PyYAML is required to export to YAML. Install with: pip install pyyaml")
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)
