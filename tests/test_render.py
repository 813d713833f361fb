import json

import pytest
import yaml

from timoni.api import ArtifactReference
from timoni.render import (
    format_table,
    render_bundle,
    render_instance,
    render_json,
    render_objects,
    render_yaml,
    tag_rows,
)


def config_map(name, namespace="apps", data=None):
    return {
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": name, "namespace": namespace},
        "data": data or {"server": "tcp://example.internal"},
    }


def test_render_yaml_pins_document_format():
    obj = {"kind": "ConfigMap", "apiVersion": "v1", "metadata": {"name": "a"}}
    assert render_yaml([obj]) == "apiVersion: v1\nkind: ConfigMap\nmetadata:\n  name: a\n---\n"


def test_render_yaml_round_trips():
    objects = [config_map("app-client"), config_map("app-server")]
    output = render_yaml(objects)
    assert "tcp://example.internal" in output
    loaded = [doc for doc in yaml.safe_load_all(output) if doc is not None]
    assert loaded == objects


def test_render_json_wraps_objects_in_list():
    output = render_json([config_map("a"), config_map("b")])
    assert '"kind": "List"' in output
    assert output.startswith('{\n    "apiVersion": "v1",\n    "kind": "List",')
    parsed = json.loads(output)
    assert len(parsed["items"]) == 2
    assert parsed["items"][1]["metadata"]["name"] == "b"


def test_render_json_omits_empty_items():
    assert json.loads(render_json([])) == {"apiVersion": "v1", "kind": "List"}


def test_render_json_escapes_html_characters():
    output = render_json([config_map("a", data={"expr": "a<b&c>d"})])
    assert "\\u003c" in output and "\\u0026" in output and "\\u003e" in output
    assert json.loads(output)["items"][0]["data"]["expr"] == "a<b&c>d"


def test_render_objects_selects_format():
    objects = [config_map("a")]
    assert render_objects(objects, "yaml") == render_yaml(objects)
    assert render_objects(objects, "json") == render_json(objects)


def test_render_objects_rejects_unknown_format():
    with pytest.raises(ValueError, match="unknown --output=xml, can be yaml or json"):
        render_objects([], "xml")


def test_render_instance_orders_by_kind_then_name():
    deployment = {"kind": "Deployment", "metadata": {"name": "a"}}
    namespace = {"kind": "Namespace", "metadata": {"name": "z"}}
    cm_b = {"kind": "ConfigMap", "metadata": {"name": "b"}}
    cm_a = {"kind": "ConfigMap", "metadata": {"name": "a"}}
    output = render_instance([deployment, cm_b, namespace, cm_a])
    docs = list(yaml.safe_load_all(output))
    assert [(d["kind"], d["metadata"]["name"]) for d in docs] == [
        ("Namespace", "z"),
        ("ConfigMap", "a"),
        ("ConfigMap", "b"),
        ("Deployment", "a"),
    ]


def test_render_instance_has_no_trailing_separator():
    output = render_instance([
        {"kind": "ConfigMap", "metadata": {"name": "b"}},
        {"kind": "Namespace", "metadata": {"name": "a"}},
    ])
    assert output == (
        "kind: Namespace\nmetadata:\n  name: a\n---\n"
        "kind: ConfigMap\nmetadata:\n  name: b\n"
    )


def test_render_bundle_pins_layout():
    output = render_bundle([
        ("frontend", [{"kind": "ConfigMap", "metadata": {"name": "frontend-client"}}]),
        ("backend", [{"kind": "ConfigMap", "metadata": {"name": "backend-server"}}]),
    ])
    assert output == (
        "---\n# Instance: frontend\n---\n"
        "kind: ConfigMap\nmetadata:\n  name: frontend-client\n\n"
        "---\n# Instance: backend\n---\n"
        "kind: ConfigMap\nmetadata:\n  name: backend-server\n"
    )


def test_render_bundle_accepts_mapping_and_reads_back():
    output = render_bundle({
        "frontend": [config_map("frontend-client", data={"server": "tcp://my.host:443"})],
        "backend": [config_map("backend-server", data={"hostname": "example.internal"})],
    })
    docs = [d for d in yaml.safe_load_all(output) if d is not None]
    assert len(docs) == 2
    by_name = {d["metadata"]["name"]: d for d in docs}
    assert "my.host" in by_name["frontend-client"]["data"]["server"]
    assert by_name["backend-server"]["data"]["hostname"] == "example.internal"


def test_tag_rows_from_artifacts():
    artifacts = [
        ArtifactReference(repository="r", tag="1.0.0", digest="sha256:aaa"),
        ArtifactReference(repository="r", tag="latest", digest="sha256:bbb"),
    ]
    assert tag_rows(artifacts) == [["1.0.0", "sha256:aaa"], ["latest", "sha256:bbb"]]


def test_format_table_aligns_columns():
    table = format_table(["tag", "digest"], [["1.0.0", "sha256:aaa"], ["latest", ""]])
    assert table == "TAG      DIGEST\n1.0.0    sha256:aaa\nlatest\n"


def test_format_table_header_only():
    assert format_table(["tag", "digest"], []) == "TAG   DIGEST\n"