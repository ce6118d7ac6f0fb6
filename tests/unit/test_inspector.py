"""Tests for container lookup, image inspection and field extraction."""
import json

import pytest

from deployer.errors import ContainerNotFound, InspectError
from deployer.inspector import DEFAULT_FIELDS, ContainerInspector, extract_field
from deployer.models import MISSING, ContainerSummary


def _container(cid, image):
    return ContainerSummary(id=cid, name=cid, image=image, status="running")


class TestFindContainer:
    def test_ancestor_match_first(self, runtime):
        runtime.list_containers.side_effect = lambda filters=None: (
            [_container("anc1", "nginx:alpine")] if filters else [_container("other", "nginx-foo")]
        )

        found = ContainerInspector(runtime).find_container("nginx", ancestor="nginx:alpine")

        assert found.id == "anc1"
        runtime.list_containers.assert_called_once_with(filters={"ancestor": "nginx:alpine"})

    def test_substring_fallback_case_insensitive(self, runtime):
        runtime.list_containers.side_effect = lambda filters=None: (
            []
            if filters
            else [
                _container("be1", "app-backend"),
                _container("px1", "Custom-NGINX-Proxy"),
            ]
        )

        found = ContainerInspector(runtime).find_container("nginx")

        assert found.id == "px1"

    def test_first_of_several_matches(self, runtime):
        runtime.list_containers.side_effect = lambda filters=None: (
            [] if filters else [_container("one", "nginx-a"), _container("two", "nginx-b")]
        )

        assert ContainerInspector(runtime).find_container("nginx").id == "one"

    def test_ancestor_defaults_to_pattern(self, runtime):
        ContainerInspector(runtime).find_container("nginx")
        runtime.list_containers.assert_called_once_with(filters={"ancestor": "nginx"})

    def test_not_found(self, runtime):
        runtime.list_containers.side_effect = lambda filters=None: (
            [] if filters else [_container("be1", "app-backend")]
        )

        with pytest.raises(ContainerNotFound) as exc:
            ContainerInspector(runtime).find_container("nginx")

        assert exc.value.pattern == "nginx"


class TestInspectImage:
    def test_returns_record(self, runtime, nginx_record):
        assert ContainerInspector(runtime).inspect_image("nginx:alpine") == nginx_record

    def test_runtime_error_wrapped(self, runtime):
        runtime.inspect_image.side_effect = Exception("No such image")

        with pytest.raises(InspectError, match="No such image"):
            ContainerInspector(runtime).inspect_image("nginx:alpine")

    def test_unexpected_shape(self, runtime):
        runtime.inspect_image.return_value = ["not", "a", "dict"]

        with pytest.raises(InspectError):
            ContainerInspector(runtime).inspect_image("nginx:alpine")


class TestWriteReport:
    def test_writes_json_array(self, runtime, nginx_record, tmp_path):
        path = ContainerInspector(runtime).write_report(nginx_record, tmp_path / "out" / "report.json")

        data = json.loads(path.read_text())
        assert data == [nginx_record]


class TestExtractFields:
    def test_all_present(self, runtime, nginx_record):
        meta = ContainerInspector(runtime).extract_fields(nginx_record, image="nginx:alpine")

        assert list(meta.fields) == list(DEFAULT_FIELDS)
        assert meta.fields["RepoTags"] == ["nginx:alpine"]
        assert meta.fields["Config.ExposedPorts"] == {"80/tcp": {}}
        assert meta.missing_fields() == []

    def test_missing_os_does_not_abort(self, runtime, nginx_record):
        del nginx_record["Os"]

        meta = ContainerInspector(runtime).extract_fields(nginx_record)

        assert meta.fields["Os"] is MISSING
        assert meta.missing_fields() == ["Os"]
        assert meta.fields["Created"] == "2024-05-01T10:00:00Z"
        assert meta.fields["Config"]["Cmd"][0] == "nginx"
        assert meta.fields["Config.ExposedPorts"] == {"80/tcp": {}}

    def test_missing_parent_marks_child_missing(self, runtime):
        meta = ContainerInspector(runtime).extract_fields({"Os": "linux"})

        assert meta.fields["Config"] is MISSING
        assert meta.fields["Config.ExposedPorts"] is MISSING
        assert meta.present_fields() == {"Os": "linux"}

    def test_null_is_not_missing(self):
        assert extract_field({"Config": {"ExposedPorts": None}}, "Config.ExposedPorts") is None

    def test_log_metadata_handles_missing(self, runtime):
        inspector = ContainerInspector(runtime)
        meta = inspector.extract_fields({"RepoTags": ["nginx:alpine"]}, image="nginx:alpine")

        inspector.log_metadata(meta)
