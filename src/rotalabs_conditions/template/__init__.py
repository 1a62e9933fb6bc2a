"""Server template module for rotalabs-conditions.

This module evaluates Remote Config server templates into typed configs.
"""

from rotalabs_conditions.template.data import (
    ParameterValue,
    RemoteConfigParameter,
    ServerTemplateData,
)
from rotalabs_conditions.template.server import ServerTemplate, init_server_template
from rotalabs_conditions.template.values import ServerConfig, Value, ValueSource

__all__ = [
    "ParameterValue",
    "RemoteConfigParameter",
    "ServerTemplateData",
    "ServerTemplate",
    "init_server_template",
    "ServerConfig",
    "Value",
    "ValueSource",
]
