"""API types and constants for instances, bundles, modules and runtimes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

GROUP = "timoni.sh"
VERSION = "v1alpha1"

INSTANCE_KIND = "Instance"
INSTANCE_STORAGE_TYPE = "timoni.sh/instance"
FIELD_MANAGER = "timoni"

ENABLED_VALUE = "enabled"
DISABLED_VALUE = "disabled"

PRUNE_ACTION = f"action.{GROUP}/prune"
FORCE_ACTION = f"action.{GROUP}/force"
IF_NOT_PRESENT_ACTION = f"action.{GROUP}/one-off"
WAIT_ACTION = f"action.{GROUP}/wait"

ARTIFACT_PREFIX = "oci://"
LOCAL_PREFIX = "file://"
USER_AGENT = "timoni/v1"
CONFIG_MEDIA_TYPE = "application/vnd.timoni.config.v1+json"
CONTENT_MEDIA_TYPE = "application/vnd.timoni.content.v1.tar+gzip"
CONTENT_TYPE_ANNOTATION = "sh.timoni.content.type"
ANY_CONTENT_TYPE = ""
TIMONI_MOD_CONTENT_TYPE = "module"
TIMONI_MOD_VENDOR_CONTENT_TYPE = "module/vendor"
CUE_MOD_GEN_CONTENT_TYPE = "cue.mod/gen"
CUE_MOD_PKG_CONTENT_TYPE = "cue.mod/pkg"
SOURCE_ANNOTATION = "org.opencontainers.image.source"
REVISION_ANNOTATION = "org.opencontainers.image.revision"
VERSION_ANNOTATION = "org.opencontainers.image.version"
CREATED_ANNOTATION = "org.opencontainers.image.created"

BUNDLE_NAME_LABEL_KEY = "bundle.timoni.sh/name"

LATEST_VERSION = "latest"

IGNORE_FILE = "timoni.ignore"
DEFAULT_IGNORE_PATTERNS = """# VCS
.git/
.gitignore
.gitmodules
.gitattributes

# Go
vendor/
go.mod
go.sum

# CUE
*_tool.cue
debug_values.cue
"""

RUNTIME_KIND = "runtime"
RUNTIME_DEFAULT_NAME = "_default"
RUNTIME_DELIMITER = ":"


class Selector(str, Enum):
    """CUE paths known to the tool."""

    BUNDLE_API_VERSION = "bundle.apiVersion"
    BUNDLE_NAME = "bundle.name"
    BUNDLE_INSTANCES = "bundle.instances"
    BUNDLE_MODULE_URL = "module.url"
    BUNDLE_MODULE_VERSION = "module.version"
    BUNDLE_MODULE_DIGEST = "module.digest"
    BUNDLE_NAMESPACE = "namespace"
    VALUES = "values"
    API_VERSION = "timoni.apiVersion"
    INSTANCE = "timoni.instance"
    CONFIG_VALUES = "timoni.instance.config"
    APPLY = "timoni.apply"
    RUNTIME_API_VERSION = "runtime.apiVersion"
    RUNTIME_NAME = "runtime.name"
    RUNTIME_CLUSTERS = "runtime.clusters"
    RUNTIME_VALUES = "runtime.values"

    def __str__(self) -> str:
        return self.value


@dataclass
class ArtifactReference:
    """Location of an artifact in a container registry."""

    repository: str = ""
    tag: str = ""
    digest: str = ""


@dataclass
class ModuleReference:
    """Location of a module's artifact in a registry or on disk."""

    name: str = ""
    repository: str = ""
    version: str = ""
    digest: str = ""
    annotations: dict[str, str] = field(default_factory=dict)


@dataclass
class ImageReference:
    """Location of a container image."""

    repository: str = ""
    tag: str = ""
    digest: str = ""
    reference: str = ""


@dataclass
class BundleInstance:
    """An instance declared in a bundle."""

    name: str = ""
    namespace: str = ""
    module: ModuleReference = field(default_factory=ModuleReference)
    bundle: str = ""
    cluster: str = ""
    values: Any = None


@dataclass
class Bundle:
    """A bundle name and its instances."""

    name: str = ""
    instances: list[BundleInstance] = field(default_factory=list)


@dataclass
class ResourceRef:
    """Reference to a Kubernetes object: '<namespace>_<name>_<group>_<kind>' and API version."""

    id: str = ""
    version: str = ""


@dataclass
class ResourceInventory:
    """The Kubernetes objects managed by an instance."""

    entries: list[ResourceRef] = field(default_factory=list)


@dataclass
class Instance:
    """Module, values and managed resources of an installed instance."""

    name: str = ""
    namespace: str = ""
    module: ModuleReference = field(default_factory=ModuleReference)
    values: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    last_transition_time: str = ""
    inventory: ResourceInventory | None = None
    images: list[str] = field(default_factory=list)
    kind: str = INSTANCE_KIND
    api_version: str = f"{GROUP}/{VERSION}"


@dataclass
class RuntimeAttribute:
    """A runtime variable name and type taken from a CUE attribute."""

    name: str
    type: str


def is_runtime_attribute(key: str, body: str) -> bool:
    """Tell whether a CUE attribute has the form @timoni(runtime:TYPE:NAME)."""
    if key != FIELD_MANAGER:
        return False
    parts = body.split(RUNTIME_DELIMITER)
    return len(parts) == 3 and parts[0] == RUNTIME_KIND


def new_runtime_attribute(key: str, body: str) -> RuntimeAttribute:
    """Parse a runtime CUE attribute, raising ValueError on a bad format."""
    if not is_runtime_attribute(key, body):
        raise ValueError(
            f"invalid format, must be @timoni({RUNTIME_KIND}{RUNTIME_DELIMITER}"
            f"[TYPE]{RUNTIME_DELIMITER}[NAME])"
        )
    _, attr_type, name = body.split(RUNTIME_DELIMITER)
    return RuntimeAttribute(name=name, type=attr_type)


@dataclass
class RuntimeCluster:
    """A Kubernetes cluster belonging to a runtime."""

    name: str
    group: str
    kube_context: str

    def is_default(self) -> bool:
        """True if the cluster comes from a runtime with no target clusters."""
        return self.name == RUNTIME_DEFAULT_NAME

    def name_group_values(self) -> dict[str, str]:
        """Cluster name and group variables; empty for the default cluster."""
        if self.is_default():
            return {}
        return {
            "TIMONI_CLUSTER_NAME": self.name,
            "TIMONI_CLUSTER_GROUP": self.group,
        }


@dataclass
class RuntimeResourceRef:
    """A Kubernetes resource and the CUE expressions to query its fields."""

    api_version: str = ""
    kind: str = ""
    name: str = ""
    namespace: str = ""
    expressions: dict[str, str] = field(default_factory=dict)
    optional: bool = False


@dataclass
class Runtime:
    """Runtime clusters and in-cluster resource references."""

    name: str = ""
    clusters: list[RuntimeCluster] = field(default_factory=list)
    refs: list[RuntimeResourceRef] = field(default_factory=list)

    def select_clusters(self, name: str, group: str) -> list[RuntimeCluster]:
        """Clusters matching name and group; both accept '*' or '' as wildcard."""

        def matches(value: str, wanted: str) -> bool:
            return wanted in ("", "*") or value.casefold() == wanted.casefold()

        return [
            cluster
            for cluster in self.clusters
            if matches(cluster.name, name) and matches(cluster.group, group)
        ]


def default_runtime(kube_context: str) -> Runtime:
    """An empty runtime with one unnamed cluster set to the given context."""
    cluster = RuntimeCluster(
        name=RUNTIME_DEFAULT_NAME,
        group=RUNTIME_DEFAULT_NAME,
        kube_context=kube_context,
    )
    return Runtime(name=RUNTIME_DEFAULT_NAME, clusters=[cluster], refs=[])


@dataclass
class RuntimeValue:
    """Query information for in-cluster values."""

    query: str
    for_: dict[str, str] = field(default_factory=dict)
    optional: bool = False

    def to_resource_ref(self) -> RuntimeResourceRef:
        """Parse 'k8s:<apiVersion>:<kind>:[<namespace>:]<name>' into a resource reference."""
        parts = self.query.split(RUNTIME_DELIMITER)
        if parts[0] != "k8s":
            raise ValueError(
                f"faild to parse '{self.query}': query must start with k8s"
            )
        if len(parts) < 4:
            raise ValueError(
                f"faild to parse '{self.query}': invalid number of parts"
            )
        if len(parts) == 5:
            namespace, name = parts[3], parts[4]
        else:
            namespace, name = "", parts[3]
        return RuntimeResourceRef(
            api_version=parts[1],
            kind=parts[2],
            name=name,
            namespace=namespace,
            expressions=dict(self.for_),
            optional=self.optional,
        )