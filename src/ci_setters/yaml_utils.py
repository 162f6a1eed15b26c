from __future__ import annotations

from io import StringIO
from typing import Any, List, Tuple

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from .types import Result, ResourceList


RESOURCE_LIST_API_VERSION = "config.kubernetes.io/v1"
RESOURCE_LIST_KIND = "ResourceList"


class ResourceListError(ValueError):
	pass


def _mk_yaml(explicit_start: bool) -> YAML:
	yaml = YAML(typ="rt")
	yaml.preserve_quotes = True
	yaml.width = 4096
	yaml.explicit_start = explicit_start
	yaml.indent(mapping=2, sequence=4, offset=2)
	return yaml


def _is_resource_list(doc: Any) -> bool:
	if not isinstance(doc, dict):
		return False
	if str(doc.get("kind", "")) != RESOURCE_LIST_KIND:
		return False
	api = str(doc.get("apiVersion", ""))
	return api.startswith("config.kubernetes.io/")


def _read_all_yaml_docs(raw: str) -> Tuple[List[Any], YAML]:
	explicit_start = raw.lstrip().startswith("---")
	yaml = _mk_yaml(explicit_start=explicit_start)
	docs = list(yaml.load_all(raw))
	return docs, yaml


def _read_resource_list(raw: str) -> Tuple[ResourceList, YAML, bool]:
	"""Parse function input.

	Returns the ResourceList, the YAML instance to dump it with, and whether the
	input was a wrapped ResourceList (as opposed to a plain resource stream).
	"""
	docs, yaml = _read_all_yaml_docs(raw)
	docs = [d for d in docs if d is not None]
	if not docs:
		raise ResourceListError("input contains no YAML documents")

	if len(docs) == 1 and _is_resource_list(docs[0]):
		doc = docs[0]
		items = doc.get("items")
		if items is None:
			items = CommentedSeq()
		if not isinstance(items, list):
			raise ResourceListError(f"ResourceList items must be a list, got {type(items).__name__}")
		fn_config = doc.get("functionConfig")
		if fn_config is not None and not isinstance(fn_config, CommentedMap):
			raise ResourceListError(f"ResourceList functionConfig must be a mapping, got {type(fn_config).__name__}")
		# Results from earlier functions in the pipeline are dropped, as kpt does.
		return ResourceList(items=list(items), function_config=fn_config), yaml, True

	for i, doc in enumerate(docs):
		if _is_resource_list(doc):
			raise ResourceListError(f"document {i}: ResourceList must be the only document in the input")
	return ResourceList(items=docs, function_config=None), yaml, False


def _result_to_node(result: Result) -> CommentedMap:
	node = CommentedMap()
	node["message"] = result.message
	node["severity"] = result.severity
	ref = result.resource_ref
	if ref is not None:
		ref_node = CommentedMap()
		ref_node["apiVersion"] = ref.api_version
		ref_node["kind"] = ref.kind
		ref_node["name"] = ref.name
		if ref.namespace:
			ref_node["namespace"] = ref.namespace
		node["resourceRef"] = ref_node
	if result.field_path:
		node["field"] = CommentedMap([("path", ".".join(result.field_path))])
	if result.file_path is not None:
		file_node = CommentedMap([("path", result.file_path)])
		if result.file_index is not None:
			file_node["index"] = result.file_index
		node["file"] = file_node
	return node


def _dump_resource_list(yaml: YAML, rl: ResourceList, *, wrapped: bool = True) -> str:
	buf = StringIO()
	if not wrapped:
		yaml.dump_all(rl.items, buf)
		return buf.getvalue()

	out = CommentedMap()
	out["apiVersion"] = RESOURCE_LIST_API_VERSION
	out["kind"] = RESOURCE_LIST_KIND
	out["items"] = CommentedSeq(rl.items)
	if rl.function_config is not None:
		out["functionConfig"] = rl.function_config
	if rl.results:
		out["results"] = CommentedSeq([_result_to_node(r) for r in rl.results])
	yaml.dump(out, buf)
	return buf.getvalue()


def _load_yaml_doc(raw: str) -> Any:
	docs, _ = _read_all_yaml_docs(raw)
	docs = [d for d in docs if d is not None]
	if len(docs) != 1:
		raise ResourceListError(f"expected exactly one YAML document, found {len(docs)}")
	return docs[0]
