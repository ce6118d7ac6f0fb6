import pytest

from deployer.errors import NoManifestFound
from deployer.resolver import resolve_compose_file


def test_returns_first_existing_candidate(tmp_path):
    (tmp_path / "a.yml").write_text("services: {}\n")

    path = resolve_compose_file(["a.yaml", "a.yml"], tmp_path)

    assert path.name == "a.yml"


def test_priority_order_wins(tmp_path):
    (tmp_path / "a.yaml").write_text("services: {}\n")
    (tmp_path / "a.yml").write_text("services: {}\n")

    assert resolve_compose_file(["a.yaml", "a.yml"], tmp_path).name == "a.yaml"
    assert resolve_compose_file(["a.yml", "a.yaml"], tmp_path).name == "a.yml"


def test_directories_are_not_manifests(tmp_path):
    (tmp_path / "compose.yaml").mkdir()
    (tmp_path / "compose.yml").write_text("services: {}\n")

    assert resolve_compose_file(["compose.yaml", "compose.yml"], tmp_path).name == "compose.yml"


def test_absolute_candidate(tmp_path):
    target = tmp_path / "custom.yaml"
    target.write_text("services: {}\n")

    assert resolve_compose_file([str(target)], "/nonexistent") == target


def test_defaults_to_cwd(tmp_path, monkeypatch):
    (tmp_path / "compose.yaml").write_text("services: {}\n")
    monkeypatch.chdir(tmp_path)

    assert resolve_compose_file(["compose.yaml"]).name == "compose.yaml"


def test_none_found(tmp_path):
    with pytest.raises(NoManifestFound) as exc:
        resolve_compose_file(["docker-compose.yaml", "docker-compose.yml"], tmp_path)

    assert exc.value.candidates == ["docker-compose.yaml", "docker-compose.yml"]
    assert "docker-compose.yml" in str(exc.value)
    assert exc.value.exit_code == 3
