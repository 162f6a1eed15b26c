from ruamel.yaml.comments import CommentedMap

from ci_setters.config import _config_map, _merge_data, _setter_values_from_config
from ci_setters.types import SetterValues


def test_setter_values_from_config_map(load_doc) -> None:
	# Intended behavior: both values come from the data map.
	doc = load_doc("""\
apiVersion: v1
kind: ConfigMap
metadata:
  name: setters
data:
  subnetwork-range: 10.2.0.0/24
  namespace: team-a
  unrelated: ignored
""")
	assert _setter_values_from_config(doc) == SetterValues(subnetwork_range="10.2.0.0/24", namespace="team-a")


def test_setter_values_absent_are_empty() -> None:
	# Intended behavior: missing config, data or keys disable the setters.
	assert _setter_values_from_config(None) == SetterValues()
	assert _setter_values_from_config(CommentedMap()) == SetterValues()
	assert _setter_values_from_config(CommentedMap({"data": "oops"})) == SetterValues()
	assert _setter_values_from_config(CommentedMap({"data": CommentedMap({"namespace": None})})) == SetterValues()


def test_setter_values_are_not_stripped() -> None:
	# Intended behavior: string values are taken verbatim.
	cfg = CommentedMap({"data": CommentedMap({"namespace": " team ", "subnetwork-range": "10.0.0.0/24"})})
	assert _setter_values_from_config(cfg) == SetterValues(subnetwork_range="10.0.0.0/24", namespace=" team ")


def test_non_string_values_disable_the_setter(load_doc) -> None:
	# Intended behavior: unquoted numbers are not strings and read as unset, keeping 1.10 from turning into "1.1".
	doc = load_doc("data:\n  namespace: 1.10\n  subnetwork-range: 10\n")
	assert _setter_values_from_config(doc) == SetterValues()

	doc = load_doc("data:\n  namespace: \"1.10\"\n")
	assert _setter_values_from_config(doc) == SetterValues(namespace="1.10")


def test_merge_data_overrides_existing_config() -> None:
	# Intended behavior: key=value overrides win over the existing data entries.
	cfg = _config_map({"namespace": "team-a", "subnetwork-range": "10.0.0.0/24"}, name="setters")
	merged = _merge_data(cfg, {"namespace": "team-b"})
	assert merged["metadata"]["name"] == "setters"
	assert _setter_values_from_config(merged) == SetterValues(subnetwork_range="10.0.0.0/24", namespace="team-b")


def test_merge_data_builds_config_map_when_missing() -> None:
	# Intended behavior: overrides alone produce a ConfigMap function config.
	merged = _merge_data(None, {"namespace": "team-c"})
	assert merged["kind"] == "ConfigMap"
	assert merged["data"] == {"namespace": "team-c"}

	merged = _merge_data(CommentedMap({"kind": "ConfigMap"}), {"namespace": "team-d"})
	assert merged["data"]["namespace"] == "team-d"
