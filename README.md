# timoni

Building blocks for working with Kubernetes application modules, bundles
and runtimes: the API types that describe instances, bundles and runtime
clusters, conversion of values files to CUE source, rendering of built
objects as text, version and digest resolution, and the argument checks
for artifact push, tag and pull requests.

## Modules

- `timoni.api`: API constants (annotation keys, media types, prefixes,
  `LATEST_VERSION`, `DEFAULT_IGNORE_PATTERNS` and others), the CUE path
  enum `Selector`, and the dataclasses `ArtifactReference`,
  `ModuleReference`, `ImageReference`, `Bundle`, `BundleInstance`,
  `Instance`, `ResourceInventory`, `ResourceRef`, `Runtime`,
  `RuntimeCluster`, `RuntimeResourceRef`, `RuntimeValue` and
  `RuntimeAttribute`.
  - `is_runtime_attribute(key, body)` and `new_runtime_attribute(key, body)`
    recognise and parse attributes of the form
    `@timoni(runtime:TYPE:NAME)`; the latter raises `ValueError` on a bad
    format.
  - `default_runtime(kube_context)` returns a runtime with a single default
    cluster.
  - `Runtime.select_clusters(name, group)` filters clusters by name and
    group, case-insensitively, with `*` or an empty string matching all.
  - `RuntimeCluster.name_group_values()` gives the `TIMONI_CLUSTER_NAME`
    and `TIMONI_CLUSTER_GROUP` variables (empty for the default cluster).
  - `RuntimeValue.to_resource_ref()` parses a query of the form
    `k8s:<apiVersion>:<kind>:[<namespace>:]<name>`, raising `ValueError`
    when it is malformed.
- `timoni.cuevalues`: `to_cue(data)` renders plain data as CUE source;
  `convert_to_cue(paths, stdin=None)` reads `.cue`, `.json`, `.yaml` and
  `.yml` values files (or `-` for CUE from standard input) and returns
  their contents as CUE bytes, raising `ValuesFileError` for unreadable
  files, bad content or an unknown extension.
- `timoni.render`: `render_yaml`, `render_json` (a `v1` `List`) and
  `render_objects(objects, output)` with `output` of `yaml` or `json`;
  `render_instance` prints one instance's objects sorted in apply order
  and `render_bundle` prints several instances under
  `# Instance: <name>` headers; `tag_rows` and `format_table` build a
  plain text tag/digest table.
- `timoni.options`: `resolve_version`, `module_image`, `check_digest`,
  `bundle_module_version` and `check_bundle_digest` (the checks raise
  `DigestMismatchError`), `start_message` for the bundle apply log line,
  `save_stream_to_file` to copy a stream to a temporary `.cue` file, and
  the `BundleFlags` runtime options.
- `timoni.artifacts`: `validate_push` returns a `PushRequest` (with its
  `reference`, `extra_tags` and `is_dir`), `push_reference`,
  `validate_tag`, `tagged_references` and `prepare_output_dir`.

## Examples

Selecting the clusters of a runtime:

```python
from timoni.api import default_runtime

runtime = default_runtime("kind-dev")
for cluster in runtime.select_clusters("*", "*"):
    print(cluster.kube_context, cluster.is_default())
```

Parsing a runtime attribute such as `@timoni(runtime:string:DOMAIN)`:

```python
from timoni.api import new_runtime_attribute

attribute = new_runtime_attribute("timoni", "runtime:string:DOMAIN")
print(attribute.type, attribute.name)  # string DOMAIN
```

Working out which module version to fetch and checking its digest:

```python
from timoni.options import resolve_version, module_image, check_digest

version = resolve_version("", "sha256:abc123")
print(module_image("oci://registry.example.com/modules/app", version))
# oci://registry.example.com/modules/app@sha256:abc123
check_digest("sha256:abc123", "sha256:abc123")
```

Converting a YAML values file and printing built objects:

```python
from timoni.cuevalues import convert_to_cue
from timoni.render import render_objects

cue_sources = convert_to_cue(["values.yaml"])

objects = [{"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "app"}}]
print(render_objects(objects, "yaml"))
```

## What this package does not do

It has no command-line program. It does not evaluate CUE, build modules,
talk to a container registry, sign or verify artifacts, or apply, diff or
prune resources on a Kubernetes cluster. It provides the types, text
conversion and checks that such steps rely on.

## Tests

The test suite uses pytest and lives in `tests/`; install the `test`
extra to get it.