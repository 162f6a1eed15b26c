from __future__ import annotations

from typing import Any, Dict, Optional

from ruamel.yaml.comments import CommentedMap

from .krm import _get_map, _get_string
from .types import SetterValues


SUBNETWORK_RANGE_KEY = "subnetwork-range"
NAMESPACE_KEY = "namespace"


def _setter_values_from_config(function_config: Optional[Any]) -> SetterValues:
	data = _get_map(function_config, "data")
	return SetterValues(
		subnetwork_range=_get_string(data, SUBNETWORK_RANGE_KEY),
		namespace=_get_string(data, NAMESPACE_KEY),
	)


def _config_map(data: Dict[str, str], name: str = "fn-config") -> CommentedMap:
	cm = CommentedMap()
	cm["apiVersion"] = "v1"
	cm["kind"] = "ConfigMap"
	cm["metadata"] = CommentedMap([("name", name)])
	cm["data"] = CommentedMap(data.items())
	return cm


def _merge_data(function_config: Optional[Any], overrides: Dict[str, str]) -> CommentedMap:
	"""Return a function config with ``overrides`` applied to its data map.

	A missing or non-mapping config is replaced by a fresh ConfigMap.
	"""
	if not isinstance(function_config, CommentedMap):
		return _config_map(overrides)
	data = function_config.get("data")
	if not isinstance(data, CommentedMap):
		data = CommentedMap()
		function_config["data"] = data
	for k, v in overrides.items():
		data[k] = v
	return function_config
