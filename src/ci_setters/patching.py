from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .config import _setter_values_from_config
from .krm import (
	FieldSetError,
	_file_location,
	_get_map,
	_get_string,
	_is_gvk,
	_resource_name,
	_resource_ref,
	_set_nested_field,
)
from .types import SEVERITY_ERROR, SEVERITY_INFO, Gvk, Result, ResourceList, SetterValues


CONTAINER_CLUSTER = Gvk(group="container.cnrm.cloud.google.com", version="v1beta1", kind="ContainerCluster")
IAM_POLICY_MEMBER = Gvk(group="iam.cnrm.cloud.google.com", version="v1beta1", kind="IAMPolicyMember")
PROJECT_SERVICE_SET = Gvk(group="blueprints.cloud.google.com", version="v1alpha1", kind="ProjectServiceSet")

DEVELOPER_ACCESS_MEMBER = "k8s-developer-access"
PRIVATE_NETWORK_DISPLAY_NAME = "private-net"


@dataclass(frozen=True)
class PatchRule:
	"""Describe one conditional field patch applied to matching resources."""
	# name: short identifier used in tests and diagnostics.
	name: str
	# gvk: resource type to match exactly; None matches every resource.
	gvk: Optional[Gvk]
	# resource_name: exact metadata.name to match; None matches any name.
	resource_name: Optional[str]
	# setting: SetterValues attribute that must be non-empty for the rule to run.
	setting: str
	# field_path: where the value is written.
	field_path: List[str]
	# value: builds the value to write from the setter values.
	value: Callable[[SetterValues], Any]
	# message: builds the info message for a successful patch.
	message: Callable[[Any], str]
	# guard: extra precondition evaluated on the document just before patching.
	guard: Optional[Callable[[Any], bool]] = None


def _authorized_networks(values: SetterValues) -> List[dict]:
	return [{"cidrBlock": values.subnetwork_range, "displayName": PRIVATE_NETWORK_DISPLAY_NAME}]


def _has_namespace(doc: Any) -> bool:
	return len(_get_string(_get_map(doc, "metadata"), "namespace")) > 0


PATCH_RULES: List[PatchRule] = [
	PatchRule(
		name="cluster-authorized-network",
		gvk=CONTAINER_CLUSTER,
		resource_name=None,
		setting="subnetwork_range",
		field_path=["spec", "masterAuthorizedNetworksConfig", "cidrBlocks"],
		value=_authorized_networks,
		message=lambda doc: "Added auth-network block for private GKE cluster to match subnetwork-range",
	),
	PatchRule(
		name="developer-access-namespace",
		gvk=IAM_POLICY_MEMBER,
		resource_name=DEVELOPER_ACCESS_MEMBER,
		setting="namespace",
		field_path=["spec", "memberFrom", "serviceAccountRef", "namespace"],
		value=lambda values: values.namespace,
		message=lambda doc: f"Updated {DEVELOPER_ACCESS_MEMBER} referenced namespace",
	),
	PatchRule(
		name="resource-namespace",
		gvk=None,
		resource_name=None,
		setting="namespace",
		field_path=["metadata", "namespace"],
		value=lambda values: values.namespace,
		message=lambda doc: f"Updated {_resource_name(doc)} namespace",
	),
	# Runs after resource-namespace, so the guard only fails when that rule
	# could not write metadata.namespace.
	PatchRule(
		name="project-services-namespace",
		gvk=PROJECT_SERVICE_SET,
		resource_name=None,
		setting="namespace",
		field_path=["metadata", "namespace"],
		value=lambda values: values.namespace,
		message=lambda doc: "Updated project-services namespace",
		guard=_has_namespace,
	),
]


def _rule_applies(rule: PatchRule, doc: Any, values: SetterValues) -> bool:
	if not getattr(values, rule.setting):
		return False
	if rule.gvk is not None and not _is_gvk(doc, rule.gvk):
		return False
	if rule.resource_name is not None and _resource_name(doc) != rule.resource_name:
		return False
	if rule.guard is not None and not rule.guard(doc):
		return False
	return True


def _apply_rule(rule: PatchRule, doc: Any, values: SetterValues) -> Result:
	file_path, file_index = _file_location(doc)
	try:
		_set_nested_field(doc, rule.value(values), rule.field_path)
	except FieldSetError as e:
		return Result(
			message=str(e),
			severity=SEVERITY_ERROR,
			resource_ref=_resource_ref(doc),
			field_path=list(rule.field_path),
			file_path=file_path,
			file_index=file_index,
		)
	return Result(
		message=rule.message(doc),
		severity=SEVERITY_INFO,
		resource_ref=_resource_ref(doc),
		field_path=list(rule.field_path),
		file_path=file_path,
		file_index=file_index,
	)


def _patch_resource(
	doc: Any,
	values: SetterValues,
	*,
	rules: Optional[List[PatchRule]] = None,
) -> List[Result]:
	results: List[Result] = []
	for rule in (PATCH_RULES if rules is None else rules):
		if not _rule_applies(rule, doc, values):
			continue
		results.append(_apply_rule(rule, doc, values))
	return results


def _patch_items(values: SetterValues, items: List[Any]) -> List[Result]:
	results: List[Result] = []
	for doc in items:
		results.extend(_patch_resource(doc, values))
	return results


def run(resource_list: ResourceList) -> bool:
	"""Apply the setter values from the function config to every item.

	Items are patched in place and one result is appended per patch attempt.
	Field-set faults become error results; the pass itself always succeeds.
	"""
	values = _setter_values_from_config(resource_list.function_config)
	resource_list.results.extend(_patch_items(values, resource_list.items))
	return True
