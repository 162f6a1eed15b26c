from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional

from ruamel.yaml.comments import CommentedMap


SEVERITY_INFO = "info"
SEVERITY_ERROR = "error"


@dataclass(frozen=True)
class Gvk:
	group: str
	version: str
	kind: str


@dataclass(frozen=True)
class ResourceRef:
	api_version: str
	kind: str
	name: str
	namespace: str = ""


@dataclass(frozen=True)
class SetterValues:
	subnetwork_range: str = ""
	namespace: str = ""


@dataclass
class Result:
	message: str
	severity: str = SEVERITY_INFO
	resource_ref: Optional[ResourceRef] = None
	field_path: Optional[List[str]] = None
	file_path: Optional[str] = None
	file_index: Optional[int] = None


@dataclass
class ResourceList:
	items: List[Any]
	function_config: Optional[CommentedMap] = None
	results: List[Result] = field(default_factory=list)
