"""Tests for execution-aware adapters."""

from __future__ import annotations

import pytest

from tiertrace.adapters.base import ExecutionAwareAdapter
from tiertrace.trace.lifecycle import SpanLifecycleError
from tiertrace.trace.recorder import ExecutionRecorder


class InferenceGatewayStub(ExecutionAwareAdapter):
    def name(self) -> str:
        return "inference-gateway"

    def infer(self, model: str, prompt: str) -> dict:
        return self._traced("infer", self._infer, model, prompt)

    def fail(self) -> None:
        return self._traced("infer", self._boom)

    def _infer(self, model: str, prompt: str) -> dict:
        return {"model": model, "response": prompt.upper()}

    def _boom(self) -> None:
        raise ConnectionError("gateway unreachable")


def test_adapter_spans_adopted_into_repo():
    adapter = InferenceGatewayStub()
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Inference-Gateway") as scope:
        adapter.set_execution_context(scope.context)
        out = adapter.infer("gpt-4", "hello")
        scope.adopt(adapter.last_execution_spans())

    assert out == {"model": "gpt-4", "response": "HELLO"}
    result = recorder.finish()
    assert result.status == "success"
    names = [s.name for s in result.execution_graph.all_spans]
    assert names == ["interface-core", "LLM-Inference-Gateway", "inference-gateway:infer"]


def test_adapter_failure_recorded_and_raised():
    adapter = InferenceGatewayStub()
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Inference-Gateway") as scope:
        adapter.set_execution_context(scope.context)
        with pytest.raises(ConnectionError):
            adapter.fail()
        spans = adapter.last_execution_spans()
        scope.adopt(spans)

    assert spans[0].status == "failed"
    assert spans[0].metadata["error"]["type"] == "ConnectionError"
    result = recorder.finish()
    assert result.valid
    assert result.execution_graph.root_span.children[0].children[0].status == "failed"


def test_last_spans_reset_per_operation():
    adapter = InferenceGatewayStub()
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Inference-Gateway") as scope:
        adapter.set_execution_context(scope.context)
        adapter.infer("m", "a")
        first = adapter.last_execution_spans()
        adapter.infer("m", "b")
        second = adapter.last_execution_spans()
        scope.adopt(first + second)
    assert len(first) == 1 and len(second) == 1
    assert first[0].span_id != second[0].span_id


def test_adapter_requires_context():
    with pytest.raises(SpanLifecycleError):
        InferenceGatewayStub().infer("m", "p")


class InterruptedGateway(InferenceGatewayStub):
    def _infer(self, model: str, prompt: str) -> dict:
        raise KeyboardInterrupt


def test_adapter_interrupt_finalises_failed():
    adapter = InterruptedGateway()
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Inference-Gateway") as scope:
        adapter.set_execution_context(scope.context)
        with pytest.raises(KeyboardInterrupt):
            adapter.infer("m", "p")
        spans = adapter.last_execution_spans()
        scope.adopt(spans)

    assert spans[0].status == "failed"
    assert spans[0].metadata["error"]["type"] == "KeyboardInterrupt"
    assert recorder.finish().valid


def test_collected_spans_adopted_only_once():
    adapter = InferenceGatewayStub()
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Inference-Gateway") as scope:
        adapter.set_execution_context(scope.context)
        adapter.infer("m", "a")
        scope.adopt(adapter.last_execution_spans())
        with pytest.raises(ValueError):
            scope.adopt(adapter.last_execution_spans())
        assert len(scope.span.children) == 1
