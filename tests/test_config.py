from pathlib import Path

import pytest

from api_spec_sync.config import Config, find_config_file, load_config
from api_spec_sync.errors import ConfigError
from api_spec_sync.spec.merger import MergeStrategy

FIXTURES = Path(__file__).parent / "fixtures"


class TestDefaults:
    def test_default_config(self):
        config = Config()
        assert config.output == "openapi.yaml"
        assert config.format == "yaml"
        assert config.openapi.version == "3.0.3"
        assert config.openapi.info.title == "API"
        assert config.openapi.info.version == "1.0.0"
        assert config.generation.default_responses == ["200", "400", "500"]
        assert config.generation.merge is False
        assert config.merge.preserve_descriptions is True


class TestLoadConfig:
    def test_load_fixture(self):
        config = load_config(FIXTURES / "specsync.yaml")
        assert config.output == "build/openapi.yaml"
        assert config.openapi.info.title == "Pet Store"
        assert config.openapi.info.contact.email == "api@example.com"
        assert config.openapi.servers[0].url == "https://api.example.com"
        assert config.openapi.security.default == ["bearer"]
        assert config.openapi.security.schemes["api_key"].location == "header"
        assert config.openapi.security.schemes["bearer"].bearer_format == "JWT"
        assert config.generation.default_responses == ["200", "404"]
        assert config.generation.merge is True
        assert config.merge.conflict_strategy == MergeStrategy.EXISTING_WINS
        assert config.merge.preserve_examples is False
        assert config.merge.mark_removed_as_deprecated is True

    def test_snake_case_keys(self, tmp_path):
        f = tmp_path / "specsync.yaml"
        f.write_text("generation:\n  default_responses: ['201']\nmerge:\n  preserve_tags: false\n")
        config = load_config(f)
        assert config.generation.default_responses == ["201"]
        assert config.merge.preserve_tags is False

    def test_json_config(self, tmp_path):
        f = tmp_path / "specsync.json"
        f.write_text('{"output": "api.json", "format": "json"}')
        config = load_config(f)
        assert (config.output, config.format) == ("api.json", "json")

    def test_empty_file_gives_defaults(self, tmp_path):
        f = tmp_path / "specsync.yaml"
        f.write_text("")
        assert load_config(f) == Config()

    def test_discovered_in_search_dir(self, tmp_path):
        (tmp_path / ".specsync.yaml").write_text("output: hidden.yaml\n")
        assert find_config_file(tmp_path) == tmp_path / ".specsync.yaml"
        assert load_config(search_dir=tmp_path).output == "hidden.yaml"

    def test_first_known_name_wins(self, tmp_path):
        (tmp_path / ".specsync.yaml").write_text("output: hidden.yaml\n")
        (tmp_path / "specsync.yaml").write_text("output: visible.yaml\n")
        assert load_config(search_dir=tmp_path).output == "visible.yaml"

    def test_no_file_gives_defaults(self, tmp_path):
        assert find_config_file(tmp_path) is None
        assert load_config(search_dir=tmp_path) == Config()

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml")


class TestValidation:
    @pytest.mark.parametrize("content, field", [
        ("format: xml\n", "format"),
        ("openapi:\n  version: '2.0'\n", "openapi.version"),
        ("openapi:\n  info:\n    title: '  '\n", "openapi.info.title"),
    ])
    def test_rejects_invalid_values(self, tmp_path, content, field):
        f = tmp_path / "specsync.yaml"
        f.write_text(content)
        with pytest.raises(ConfigError) as exc:
            load_config(f)
        assert str(exc.value).startswith("config validation errors:")
        assert f"  - {field}:" in str(exc.value)

    def test_rejects_non_mapping(self, tmp_path):
        f = tmp_path / "specsync.yaml"
        f.write_text("- a\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(f)

    def test_rejects_unparseable(self, tmp_path):
        f = tmp_path / "specsync.yaml"
        f.write_text("output: [unclosed")
        with pytest.raises(ConfigError, match="failed to read"):
            load_config(f)
