from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

from ruamel.yaml.comments import CommentedMap, CommentedSeq

from .types import Gvk, ResourceRef


PATH_ANNOTATIONS = ("internal.config.kubernetes.io/path", "config.kubernetes.io/path")
INDEX_ANNOTATIONS = ("internal.config.kubernetes.io/index", "config.kubernetes.io/index")


class FieldSetError(ValueError):
	pass


def _split_api_version(api_version: str) -> Tuple[str, str]:
	if "/" not in api_version:
		return "", api_version
	group, version = api_version.rsplit("/", 1)
	return group, version


def _gvk_from_doc(doc: Any) -> Gvk:
	if not isinstance(doc, Mapping):
		return Gvk(group="", version="", kind="")
	group, version = _split_api_version(_get_string(doc, "apiVersion"))
	return Gvk(group=group, version=version, kind=_get_string(doc, "kind"))


def _is_gvk(doc: Any, gvk: Gvk) -> bool:
	return _gvk_from_doc(doc) == gvk


def _get_map(node: Any, key: str) -> Mapping:
	if not isinstance(node, Mapping):
		return {}
	val = node.get(key)
	if not isinstance(val, Mapping):
		return {}
	return val


def _get_string(node: Any, key: str) -> str:
	if not isinstance(node, Mapping):
		return ""
	val = node.get(key)
	if not isinstance(val, str):
		return ""
	return str(val)


def _resource_name(doc: Any) -> str:
	return _get_string(_get_map(doc, "metadata"), "name")


def _resource_ref(doc: Any) -> ResourceRef:
	meta = _get_map(doc, "metadata")
	return ResourceRef(
		api_version=_get_string(doc, "apiVersion"),
		kind=_get_string(doc, "kind"),
		name=_get_string(meta, "name"),
		namespace=_get_string(meta, "namespace"),
	)


def _file_location(doc: Any) -> Tuple[Optional[str], Optional[int]]:
	annotations = _get_map(_get_map(doc, "metadata"), "annotations")

	path: Optional[str] = None
	for key in PATH_ANNOTATIONS:
		v = _get_string(annotations, key)
		if v:
			path = v
			break

	index: Optional[int] = None
	for key in INDEX_ANNOTATIONS:
		v = _get_string(annotations, key).strip()
		if v.isdigit():
			index = int(v)
			break

	return path, index


def _to_yaml_node(value: Any) -> Any:
	if isinstance(value, Mapping) and not isinstance(value, CommentedMap):
		out = CommentedMap()
		for k, v in value.items():
			out[k] = _to_yaml_node(v)
		return out
	if isinstance(value, (list, tuple)) and not isinstance(value, CommentedSeq):
		return CommentedSeq([_to_yaml_node(v) for v in value])
	return value


def _set_nested_field(doc: Any, value: Any, path: List[str]) -> None:
	"""Set ``value`` at ``path`` inside ``doc``, creating missing mappings.

	A segment that is missing or null is replaced by an empty mapping. Any other
	non-mapping value on the way is a type conflict and raises FieldSetError;
	nothing is modified in that case.
	"""
	if not path:
		raise FieldSetError("cannot set a value at an empty field path")
	if not isinstance(doc, dict):
		raise FieldSetError(f"resource is a {type(doc).__name__}, not a mapping")

	# Validate the whole path first so a conflict leaves the document untouched.
	cur: Any = doc
	for idx, key in enumerate(path[:-1]):
		nxt = cur.get(key)
		if nxt is None:
			break
		if not isinstance(nxt, dict):
			label = ".".join(path[: idx + 1])
			raise FieldSetError(
				f"cannot set {'.'.join(path)}: {label} is a {_kind_of(nxt)}, not a mapping"
			)
		cur = nxt

	cur = doc
	for key in path[:-1]:
		nxt = cur.get(key)
		if nxt is None:
			nxt = CommentedMap()
			cur[key] = nxt
		cur = nxt
	cur[path[-1]] = _to_yaml_node(value)


def _kind_of(value: Any) -> str:
	if isinstance(value, list):
		return "sequence"
	if isinstance(value, str):
		return "string"
	return type(value).__name__
