"""Rendering of Kubernetes objects and artifact listings as text."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import yaml

_KIND_ORDER = [
    "CustomResourceDefinition",
    "Namespace",
    "Class",
    "ResourceQuota",
    "StorageClass",
    "ServiceAccount",
    "PodSecurityPolicy",
    "Role",
    "ClusterRole",
    "RoleBinding",
    "ClusterRoleBinding",
    "ConfigMap",
    "Secret",
    "Service",
    "LimitRange",
    "PriorityClass",
    "Deployment",
    "StatefulSet",
    "CronJob",
    "PodDisruptionBudget",
    "MutatingWebhookConfiguration",
    "ValidatingWebhookConfiguration",
]
_KIND_RANK = {kind: rank for rank, kind in enumerate(_KIND_ORDER)}

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _dump_yaml(obj: Mapping) -> str:
    return yaml.safe_dump(
        dict(obj), sort_keys=True, default_flow_style=False, allow_unicode=True
    )


def _sorted(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _sorted(value[key]) for key in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [_sorted(item) for item in value]
    return value


def render_yaml(objects: Iterable[Mapping]) -> str:
    """Each object as a YAML document followed by a '---' separator."""
    return "".join(_dump_yaml(obj) + "---\n" for obj in objects)


def render_json(objects: Sequence[Mapping]) -> str:
    """The objects wrapped in a v1 List, as indented JSON."""
    document: dict[str, Any] = {"apiVersion": "v1", "kind": "List"}
    if objects:
        document["items"] = [_sorted(obj) for obj in objects]
    text = json.dumps(document, indent=4, ensure_ascii=False)
    for char, escape in _HTML_ESCAPES.items():
        text = text.replace(char, escape)
    return text


def render_objects(objects: Sequence[Mapping], output: str) -> str:
    """Render objects as 'yaml' or 'json'; any other format raises ValueError."""
    if output == "yaml":
        return render_yaml(objects)
    if output == "json":
        return render_json(objects)
    raise ValueError(f"unknown --output={output}, can be yaml or json")


def _sort_key(obj: Mapping) -> tuple:
    kind = str(obj.get("kind", ""))
    rank = _KIND_RANK.get(kind)
    if rank is None and kind.endswith("Class"):
        rank = _KIND_RANK["Class"]
    if rank is None:
        rank = len(_KIND_ORDER)
    metadata = obj.get("metadata") or {}
    return (
        rank,
        kind if rank == len(_KIND_ORDER) else "",
        str(metadata.get("namespace", "")),
        str(metadata.get("name", "")),
    )


def render_instance(objects: Iterable[Mapping]) -> str:
    """The objects of one instance in apply order, as '---'-separated YAML."""
    ordered = sorted(objects, key=_sort_key)
    return "---\n".join(_dump_yaml(obj) for obj in ordered)


def render_bundle(
    instances: Mapping[str, Iterable[Mapping]] | Iterable[tuple[str, Iterable[Mapping]]],
) -> str:
    """All instances of a bundle, each under an '# Instance: <name>' header."""
    pairs = list(instances.items() if isinstance(instances, Mapping) else instances)
    parts = []
    for index, (name, objects) in enumerate(pairs):
        parts.append(f"---\n# Instance: {name}\n---\n")
        parts.append(render_instance(objects))
        if index < len(pairs) - 1:
            parts.append("\n")
    return "".join(parts)


def tag_rows(artifacts: Iterable[Any]) -> list[list[str]]:
    """Table rows of tag and digest for each artifact reference."""
    return [[artifact.tag, artifact.digest] for artifact in artifacts]


def format_table(header: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """A plain text table with upper-case headings and left-aligned columns."""
    table = [[str(cell).upper() for cell in header]]
    table.extend([str(cell) for cell in row] for row in rows)
    columns = max(len(row) for row in table)
    widths = [
        max((len(row[col]) for row in table if col < len(row)), default=0)
        for col in range(columns)
    ]
    lines = [
        "   ".join(cell.ljust(widths[col]) for col, cell in enumerate(row)).rstrip()
        for row in table
    ]
    return "\n".join(lines) + "\n"