from __future__ import annotations

from pathy_server.config import (
    DEFAULT_IGNORE_GLOBS,
    ConfigStore,
    PathyConfig,
    default_config,
    load_effective_config,
    merge_config,
    select_settings_root,
)


def test_defaults_when_no_payload() -> None:
    config = load_effective_config(None, None)

    assert config == default_config()
    assert config.enable is True
    assert config.path_prefix_fallback is True
    assert config.context_gating == "smart"
    assert config.base_dir == "file_dir"
    assert config.workspace_root_strategy == "lsp_root_uri"
    assert config.max_results == 80
    assert config.show_hidden is False
    assert config.include_files is True
    assert config.include_directories is True
    assert config.directory_trailing_slash is True
    assert config.ignore_globs == DEFAULT_IGNORE_GLOBS
    assert "**/.git/**" in config.ignore_globs
    assert config.prefer_forward_slashes is True
    assert config.expand_tilde is True
    assert config.cache_ttl_ms == 500
    assert config.cache_max_dirs == 64
    assert config.stat_strategy == "lazy"
    assert config.explicit_keys == frozenset()


def test_client_values_override_defaults() -> None:
    config = load_effective_config(
        None,
        {
            "enable": False,
            "max_results": 20,
            "context_gating": "strict",
            "base_dir": "both",
            "ignore_globs": ["**/.git/**"],
            "extra_path_calls": ["loaders.load_data"],
        },
    )

    assert config.enable is False
    assert config.max_results == 20
    assert config.context_gating == "strict"
    assert config.base_dir == "both"
    assert config.ignore_globs == ("**/.git/**",)
    assert config.extra_path_calls == ("loaders.load_data",)
    assert config.is_explicit("max_results")
    assert not config.is_explicit("show_hidden")


def test_unknown_keys_are_ignored_without_warnings() -> None:
    result = merge_config(default_config(), {"bogus": 1, "max_results": 5})

    assert result.config.max_results == 5
    assert result.warnings == ()


def test_settings_root_selection_variants() -> None:
    table = {"show_hidden": True}

    assert select_settings_root({"settings": {"lsp": {"pathy": {"settings": table}}}}) == table
    assert select_settings_root({"lsp": {"pathy": table}}) == table
    assert select_settings_root({"pathy": table}) == table
    assert select_settings_root({"settings": {"pathy": table}}) == table
    assert select_settings_root(table) == table
    assert select_settings_root(["not", "a", "mapping"]) is None


def test_nested_client_settings_are_applied() -> None:
    payload = {"settings": {"lsp": {"pathy": {"settings": {"show_hidden": True}}}}}

    assert load_effective_config(None, payload).show_hidden is True


def test_public_dict_is_json_friendly() -> None:
    config = merge_config(default_config(), {"max_results": 7}).config
    public = config.to_public_dict()

    assert public["max_results"] == 7
    assert isinstance(public["ignore_globs"], list)
    assert public["explicit_keys"] == ["max_results"]


def test_config_store_swaps_whole_snapshots() -> None:
    store = ConfigStore()
    updated = PathyConfig(max_results=3)

    previous = store.replace(updated)

    assert previous == default_config()
    assert store.current() is updated
