import io
import os

import pytest

from timoni.api import ModuleReference, RuntimeCluster, default_runtime
from timoni.options import (
    BundleFlags,
    DigestMismatchError,
    bundle_module_version,
    check_bundle_digest,
    check_digest,
    module_image,
    resolve_version,
    save_stream_to_file,
    start_message,
)


@pytest.mark.parametrize(
    "version, digest, expected",
    [
        ("1.0.0", "", "1.0.0"),
        ("1.0.0", "sha256:123456", "1.0.0"),
        ("", "sha256:123456", "@sha256:123456"),
        ("", "", "latest"),
    ],
)
def test_resolve_version(version, digest, expected):
    assert resolve_version(version, digest) == expected


def test_module_image_with_tag():
    assert module_image("oci://reg/org/mod", "1.0.0") == "oci://reg/org/mod:1.0.0"


def test_module_image_with_digest():
    assert (
        module_image("oci://reg/org/mod", "@sha256:abc")
        == "oci://reg/org/mod@sha256:abc"
    )


def test_module_image_local_path_unchanged():
    assert module_image("testdata/module", "latest") == "testdata/module"


def test_check_digest_matches():
    check_digest("sha256:abc", "sha256:abc")
    check_digest("", "sha256:anything")
    assert resolve_version("", "sha256:abc") == "@sha256:abc"


def test_check_digest_mismatch_message():
    with pytest.raises(DigestMismatchError) as info:
        check_digest("sha256:123456", "sha256:abcdef")
    assert "digest mismatch, expected sha256:123456 got sha256:abcdef" in str(info.value)


def test_bundle_module_version_digest_overrides_latest():
    module = ModuleReference(version="latest", digest="sha256:v1")
    assert bundle_module_version(module) == "@sha256:v1"


def test_bundle_module_version_keeps_explicit_version():
    module = ModuleReference(version="1.0.0", digest="sha256:v1")
    assert bundle_module_version(module) == "1.0.0"


def test_bundle_module_version_latest_without_digest():
    assert bundle_module_version(ModuleReference(version="latest")) == "latest"


def test_check_bundle_digest_mismatch_names_digest():
    module = ModuleReference(version="2.0.0", digest="sha256:v1")
    with pytest.raises(DigestMismatchError) as info:
        check_bundle_digest(module, "sha256:v2")
    message = str(info.value)
    assert "sha256:v1" in message
    assert message == (
        "the upstream digest sha256:v2 of version 2.0.0 "
        "doesn't match the specified digest sha256:v1"
    )


def test_check_bundle_digest_without_pin_accepts_anything():
    module = ModuleReference(version="2.0.0")
    check_bundle_digest(module, "sha256:v2")
    assert module.digest == ""


def test_start_message_default_cluster():
    cluster = default_runtime("envtest").clusters[0]
    assert start_message(2, cluster) == "applying 2 instance(s)"


def test_start_message_named_cluster():
    cluster = RuntimeCluster(name="test", group="testing", kube_context="envtest")
    assert start_message(1, cluster) == "applying 1 instance(s) on testing"


def test_start_message_without_cluster():
    assert start_message(3) == "applying 3 instance(s)"


def test_bundle_flags_defaults():
    flags = BundleFlags()
    assert flags.runtime_from_env is False
    assert flags.runtime_files == []
    assert flags.runtime_cluster == "*"
    assert flags.runtime_cluster_group == "*"


def test_bundle_flags_select_with_runtime():
    flags = BundleFlags(runtime_cluster="prod")
    runtime = default_runtime("envtest")
    assert runtime.select_clusters(flags.runtime_cluster, flags.runtime_cluster_group) == []


@pytest.mark.parametrize(
    "stream",
    [io.StringIO('values: domain: "example.org"'), io.BytesIO(b'values: domain: "example.org"')],
)
def test_save_stream_to_file(stream):
    path = save_stream_to_file(stream)
    try:
        assert path.endswith(".cue")
        with open(path, "rb") as handle:
            assert handle.read() == b'values: domain: "example.org"'
    finally:
        os.remove(path)


def test_save_stream_to_file_empty():
    path = save_stream_to_file(io.BytesIO(b""))
    try:
        assert os.path.getsize(path) == 0
    finally:
        os.remove(path)