from ci_setters.env import _env_bool, _env_get, _env_key, _env_path


def test_env_helpers(monkeypatch) -> None:
	# Intended behavior: env helpers parse and default correctly.
	monkeypatch.delenv("CI_SETTERS_FOO", raising=False)
	assert _env_key("FOO") == "CI_SETTERS_FOO"
	assert _env_get("CI_SETTERS_FOO", "ALT") is None
	assert _env_path("FOO", None) is None

	monkeypatch.setenv("CI_SETTERS_FOO", "1")
	assert _env_bool("FOO", False) is True

	monkeypatch.setenv("CI_SETTERS_FOO", "off")
	assert _env_bool("FOO", True) is False

	monkeypatch.setenv("CI_SETTERS_FOO", "")
	assert _env_bool("FOO", True) is True
	assert _env_path("FOO", None) is None

	monkeypatch.setenv("CI_SETTERS_FOO", "/tmp/example")
	assert str(_env_path("FOO", None)) == "/tmp/example"
