"""Tests for the canonical YAML codec: encoding, decoding, round-trips."""

from __future__ import annotations

import pytest

from orcapod.core.codec import (
    decode,
    decode_annotation,
    encode,
    encode_annotation,
    parse_spec,
)
from orcapod.errors import DecodeError
from orcapod.models import Pod, PodJob, StorePointer

STYLE_TRANSFER_YAML = """\
class: pod
command: tail -f /dev/null
image: zenmldocker/zenml-server:0.67.0
input_stream_map:
  image:
    match_pattern: /input/image.png
    path: /input/image.png
  painting:
    match_pattern: /input/painting.png
    path: /input/painting.png
output_dir: /output
output_stream_map:
  styled:
    match_pattern: ./styled.png
    path: ./styled.png
recommended_cpus: 0.25
recommended_memory: 2147483648
required_gpu: null
source_commit_url: https://github.com/zenml-io/zenml/tree/0.67.0
"""


class TestEncode:
    def test_pod_yaml(self, pod):
        assert encode(pod) == STYLE_TRANSFER_YAML

    def test_class_line_first(self, pod_job, store_pointer):
        assert encode(pod_job).startswith("class: pod_job\n")
        assert encode(store_pointer).startswith("class: store_pointer\n")

    def test_excludes_identity_fields(self, annotated_pod):
        text = encode(annotated_pod)
        assert "hash" not in parse_spec(text)
        assert "annotation" not in parse_spec(text)
        assert "style-transfer" not in text

    def test_pod_job_yaml(self, pod_job, pod):
        text = encode(pod_job)
        mapping = parse_spec(text)
        assert mapping["pod_hash"] == pod.hash
        assert mapping["retry_policy"] == {
            "kind": "retry_time_window",
            "max_retries": 3,
            "window_seconds": 600,
        }
        assert list(mapping) == sorted(mapping)

    def test_store_pointer_yaml(self, store, store_pointer):
        assert encode(store_pointer) == f"class: store_pointer\nuri: {store.uri}\n"

    def test_deterministic(self, pod, make_pod):
        assert encode(pod) == encode(make_pod())


class TestDecode:
    def test_round_trip_with_annotation(self, annotated_pod):
        decoded = decode(
            encode(annotated_pod),
            annotated_pod.hash,
            encode_annotation(annotated_pod.annotation),
            record_type=Pod,
        )
        assert decoded == annotated_pod

    def test_round_trip_without_annotation(self, annotated_pod, pod):
        decoded = decode(encode(annotated_pod), annotated_pod.hash, record_type=Pod)
        assert decoded.annotation is None
        assert decoded == pod

    def test_dispatch_on_class_tag(self, pod):
        decoded = decode(encode(pod), pod.hash)
        assert isinstance(decoded, Pod)

    def test_pod_job_round_trip_with_reference(self, pod_job):
        decoded = decode(
            encode(pod_job),
            pod_job.hash,
            encode_annotation(pod_job.annotation),
            record_type=PodJob,
            pod=pod_job.pod,
        )
        assert decoded == pod_job

    def test_store_pointer_round_trip(self, store_pointer):
        decoded = decode(encode(store_pointer), store_pointer.hash, record_type=StorePointer)
        assert decoded.uri == store_pointer.uri

    def test_injected_hash_is_kept(self, pod):
        decoded = decode(encode(pod), "abcdef", record_type=Pod)
        assert decoded.hash == "abcdef"

    def test_malformed_yaml(self, pod):
        with pytest.raises(DecodeError):
            decode("class: pod\ncommand: [unterminated", pod.hash, record_type=Pod)

    def test_non_mapping(self, pod):
        with pytest.raises(DecodeError):
            decode("- just\n- a list\n", pod.hash, record_type=Pod)

    def test_class_mismatch(self, pod):
        with pytest.raises(DecodeError):
            decode(encode(pod), pod.hash, record_type=StorePointer)

    def test_unknown_class(self):
        with pytest.raises(DecodeError):
            decode("class: mystery\nuri: x\n", "ab")

    def test_missing_fields(self, pod):
        with pytest.raises(DecodeError):
            decode("class: pod\nimage: alpine\n", pod.hash, record_type=Pod)

    def test_malformed_annotation(self, pod):
        with pytest.raises(DecodeError):
            decode(encode(pod), pod.hash, "name: [oops", record_type=Pod)

    def test_pod_job_without_resolved_pod(self, pod_job):
        with pytest.raises(DecodeError):
            decode(encode(pod_job), pod_job.hash, record_type=PodJob)


class TestAnnotationCodec:
    def test_round_trip(self, style_annotation):
        assert decode_annotation(encode_annotation(style_annotation)) == style_annotation

    def test_yaml_shape(self, style_annotation):
        assert encode_annotation(style_annotation) == (
            "description: This is an example pod.\n"
            "name: style-transfer\n"
            "version: 0.67.0\n"
        )

    def test_invalid_annotation(self):
        with pytest.raises(DecodeError):
            decode_annotation("name: bad name\nversion: 1.0.0\n")
