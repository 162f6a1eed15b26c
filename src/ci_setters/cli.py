from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from ruamel.yaml import YAMLError
from ruamel.yaml.comments import CommentedMap

from .config import _merge_data
from .env import _env_bool, _env_key, _env_path
from .patching import run
from .types import SEVERITY_ERROR, Result
from .yaml_utils import ResourceListError, _dump_resource_list, _load_yaml_doc, _read_resource_list


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
	ap = argparse.ArgumentParser(
		prog="ci-setters",
		description="KRM function: apply interface setter values (subnetwork-range, namespace) to Config Connector resources.",
	)
	ap.add_argument("--input", type=Path, default=None, help=f"ResourceList or resource stream to read (default: stdin) (env: {_env_key('INPUT')})")
	ap.add_argument("--output", type=Path, default=None, help=f"Where to write the result (default: stdout) (env: {_env_key('OUTPUT')})")
	ap.add_argument("--fn-config", type=Path, default=None, help=f"Function config file; replaces the ResourceList functionConfig (env: {_env_key('FN_CONFIG')})")
	ap.add_argument("--no-fail-on-error", dest="fail_on_error", action="store_false", default=None, help=f"Exit 0 even when error results were recorded (env: {_env_key('FAIL_ON_ERROR')})")
	ap.add_argument("--quiet", action="store_true", default=None, help=f"Do not print the result summary to stderr (env: {_env_key('QUIET')})")
	ap.add_argument("data", nargs="*", metavar="KEY=VALUE", help="Function config data entries, e.g. namespace=team-a")
	return ap.parse_args(argv)


def _resolve_env_args(args: argparse.Namespace) -> argparse.Namespace:
	args.input = args.input or _env_path("INPUT")
	args.output = args.output or _env_path("OUTPUT")
	args.fn_config = args.fn_config or _env_path("FN_CONFIG")
	args.fail_on_error = args.fail_on_error if args.fail_on_error is not None else _env_bool("FAIL_ON_ERROR", True)
	args.quiet = args.quiet if args.quiet is not None else _env_bool("QUIET", False)
	return args


def _parse_kv_args(pairs: List[str]) -> Dict[str, str]:
	out: Dict[str, str] = {}
	for p in pairs:
		key, sep, value = p.partition("=")
		if not sep or not key.strip():
			raise ValueError(f"invalid function config argument {p!r}, expected KEY=VALUE")
		out[key.strip()] = value
	return out


def _describe_result(r: Result) -> str:
	prefix = f"[{r.severity}]"
	ref = r.resource_ref
	if ref is None:
		return f"{prefix} {r.message}"
	ident = f"{ref.namespace}/{ref.name}" if ref.namespace else ref.name
	return f"{prefix} {ref.kind} {ident}: {r.message}"


def _format_results(results: List[Result], *, limit: int = 200) -> str:
	errors = [r for r in results if r.severity == SEVERITY_ERROR]
	lines = [
		"Summary:",
		f"- Results: {len(results)}",
		f"- Errors: {len(errors)}",
	]
	if not results:
		return "\n".join(lines)
	lines.append("")
	for r in results[:limit]:
		lines.append(f"- {_describe_result(r)}")
	if len(results) > limit:
		lines.append(f"- ... and {len(results) - limit} more")
	return "\n".join(lines)


def _read_input(path: Optional[Path]) -> str:
	if path is None:
		return sys.stdin.read()
	return path.read_text(encoding="utf-8")


def _write_output(path: Optional[Path], text: str) -> None:
	if path is None:
		sys.stdout.write(text)
		sys.stdout.flush()
		return
	path.write_text(text, encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
	args = _parse_args(argv)
	args = _resolve_env_args(args)

	try:
		overrides = _parse_kv_args(args.data)
		rl, yaml, wrapped = _read_resource_list(_read_input(args.input))
		if args.fn_config is not None:
			fn_config = _load_yaml_doc(args.fn_config.read_text(encoding="utf-8"))
			if not isinstance(fn_config, CommentedMap):
				raise ResourceListError(f"function config must be a mapping, got {type(fn_config).__name__}")
			rl.function_config = fn_config
		if overrides:
			rl.function_config = _merge_data(rl.function_config, overrides)
	except (OSError, ValueError, YAMLError) as e:
		print(f"ERROR: {e}", file=sys.stderr)
		return 2

	run(rl)

	try:
		_write_output(args.output, _dump_resource_list(yaml, rl, wrapped=wrapped))
	except (OSError, YAMLError) as e:
		print(f"ERROR: failed to write output: {e}", file=sys.stderr)
		return 2

	if not args.quiet:
		print(_format_results(rl.results), file=sys.stderr)

	if args.fail_on_error and any(r.severity == SEVERITY_ERROR for r in rl.results):
		return 1
	return 0
