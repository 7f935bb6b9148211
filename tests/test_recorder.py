"""Tests for the per-operation execution recorder."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from tiertrace.core.hashing import hash_evidence
from tiertrace.trace.lifecycle import SpanLifecycleError, create_agent, create_core, finalize
from tiertrace.trace.recorder import ExecutionRecorder
from tiertrace.trace.span import Artifact


def test_recorder_builds_valid_tree():
    recorder = ExecutionRecorder("interface-core", execution_id="exec-1")
    with recorder.repo("LLM-Inference-Gateway") as scope:
        assert scope.context.parent_span_id == scope.span.span_id
        assert scope.context.core_span_id == recorder.core_span.span_id
        assert scope.context.execution_id == "exec-1"
        with scope.agent("inference-gateway:infer") as span:
            assert span.status == "pending"
            assert span.parent_span_id == scope.span.span_id

    result = recorder.finish()
    assert result.status == "success"
    assert result.execution_id == "exec-1"
    assert [s.tier for s in result.execution_graph.all_spans] == ["core", "repo", "agent"]
    assert all(s.is_finalized for s in result.execution_graph.all_spans)


def test_recorder_context_points_at_core():
    recorder = ExecutionRecorder("interface-core")
    ctx = recorder.context
    assert ctx.parent_span_id == recorder.core_span.span_id == ctx.core_span_id
    assert ctx.execution_id == recorder.execution_id


def test_core_parent_passed_through():
    recorder = ExecutionRecorder("interface-core", parent_span_id="outer")
    assert recorder.core_span.parent_span_id == "outer"


def test_repo_without_agent_fails_result():
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Inference-Gateway"):
        pass
    result = recorder.finish()
    assert result.status == "failed"
    assert result.failure_reasons == (
        'Repo span "LLM-Inference-Gateway" has zero agent-level child spans',
    )


def test_exception_finalises_failed_and_propagates():
    recorder = ExecutionRecorder("interface-core")
    with pytest.raises(RuntimeError, match="gateway down"):
        with recorder.repo("LLM-Inference-Gateway") as scope:
            with scope.agent("inference-gateway:infer"):
                raise RuntimeError("gateway down")

    repo = recorder.core_span.children[0]
    agent = repo.children[0]
    assert agent.status == "failed"
    assert agent.metadata["error"] == {"type": "RuntimeError", "message": "gateway down"}
    assert repo.status == "failed"

    result = recorder.finish()
    assert result.valid
    assert result.status == "failed"


def test_explicit_finalize_inside_block_is_respected():
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Forge") as scope:
        with scope.agent("forge:generateInterface") as span:
            finalize(span, "success", artifacts=[Artifact("iface", "export", "out/iface.ts")])
    agent = recorder.core_span.children[0].children[0]
    assert [a.id for a in agent.artifacts] == ["iface"]


def test_staged_artifacts_and_evidence_land_on_their_spans():
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Config-Manager") as scope:
        with scope.agent("config-manager:get", evidence=[hash_evidence("payload", {"k": "v"})]):
            pass
        scope.add_artifact({"id": "cfg", "type": "config", "reference": "cfg://app"})
    recorder.add_evidence({"id": "req", "type": "id", "value": "request-1"})
    result = recorder.finish()

    core = result.execution_graph.root_span
    repo = core.children[0]
    agent = repo.children[0]
    assert agent.evidence[0].value.startswith("sha256:")
    assert repo.artifacts[0].id == "cfg"
    assert core.evidence[0].value == "request-1"


def test_finish_twice_rejected():
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Forge") as scope:
        with scope.agent("forge:op"):
            pass
    recorder.finish()
    with pytest.raises(SpanLifecycleError):
        recorder.finish()
    assert recorder.core_span.status == "success"


def test_finish_with_explicit_status():
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Forge") as scope:
        with scope.agent("forge:op"):
            pass
    assert recorder.finish("failed").status == "failed"


def test_adopt_attaches_finalised_agent_spans():
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Connector-Hub") as scope:
        external = finalize(create_agent("connector-hub:list", scope.context.parent_span_id), "success")
        scope.adopt([external])
    assert recorder.finish().status == "success"


def test_adopt_rejects_wrong_spans():
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Connector-Hub") as scope:
        with pytest.raises(ValueError):
            scope.adopt([finalize(create_core("not-an-agent"), "success")])
        with pytest.raises(ValueError):
            scope.adopt([finalize(create_agent("hub:op", "other-repo"), "success")])
        with pytest.raises(SpanLifecycleError):
            scope.adopt([create_agent("hub:op", scope.span.span_id)])
        assert scope.span.children == []


def test_concurrent_agents_under_one_repo():
    recorder = ExecutionRecorder("interface-core")

    def work(scope, i):
        with scope.agent(f"copilot-agent:task-{i}"):
            pass

    with recorder.repo("LLM-CoPilot-Agent") as scope:
        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: work(scope, i), range(64)))

    result = recorder.finish()
    assert result.status == "success"
    assert len(result.execution_graph.all_spans) == 66
    assert len(recorder.core_span.children[0].children) == 64


def test_concurrent_recorders_are_independent():
    def run(i):
        recorder = ExecutionRecorder(f"core-{i}")
        with recorder.repo("LLM-Forge") as scope:
            with scope.agent("forge:op"):
                pass
        return recorder.finish()

    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(run, range(16)))

    assert all(r.status == "success" for r in results)
    assert len({r.execution_id for r in results}) == 16
    assert all(len(r.execution_graph.all_spans) == 3 for r in results)


def test_adopt_same_span_twice_rejected():
    recorder = ExecutionRecorder("interface-core")
    with recorder.repo("LLM-Connector-Hub") as scope:
        external = finalize(create_agent("connector-hub:list", scope.span.span_id), "success")
        scope.adopt([external])
        with pytest.raises(ValueError, match="already a child"):
            scope.adopt([external])
        other = finalize(create_agent("connector-hub:get", scope.span.span_id), "success")
        with pytest.raises(ValueError, match="already a child"):
            scope.adopt([other, other])
        assert scope.span.children == [external]

    result = recorder.finish()
    assert len(result.execution_graph.all_spans) == 3


def test_interrupt_inside_block_finalises_failed():
    recorder = ExecutionRecorder("interface-core")
    with pytest.raises(KeyboardInterrupt):
        with recorder.repo("LLM-Inference-Gateway") as scope:
            with scope.agent("inference-gateway:stream"):
                raise KeyboardInterrupt

    repo = recorder.core_span.children[0]
    agent = repo.children[0]
    assert agent.status == "failed"
    assert agent.metadata["error"]["type"] == "KeyboardInterrupt"
    assert repo.status == "failed"
    assert recorder.finish().status == "failed"
