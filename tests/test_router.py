"""Delegation loop behaviour."""
import asyncio
import json
import os

import pytest

from orchestrator import prompts
from orchestrator.agents import AgentSet
from orchestrator.router import UNKNOWN_AGENT_PREFIX, execute

from fakes import FailingAgent, FakeAgent, delegate, done


@pytest.mark.asyncio
async def test_two_delegations_then_done(audio_file):
    coordinator = FakeAgent("Coordinator", responder=[
        delegate("Worker1", "Transcribe something"),
        delegate("Worker2", "SetReminder for task"),
        done("All tasks completed"),
    ])
    worker1 = FakeAgent("Worker1", ["TranscribeVoiceRecording"], "transcribed text")
    worker2 = FakeAgent("Worker2", ["SetReminder"], "Reminder set")

    result = await execute(str(audio_file), AgentSet(coordinator, [worker1, worker2]))

    assert [a.agent for a in result.actions] == ["Coordinator", "Worker1", "Coordinator", "Worker2", "Coordinator"]
    assert [a.action for a in result.actions] == ["Plan", "Transcribe", "Plan", "SetReminder", "Plan"]
    assert result.summary == "All tasks completed"
    assert result.completed
    assert result.transcription == "transcribed text"
    assert worker1.inputs == ["Transcribe something"]
    assert worker2.inputs == ["SetReminder for task"]


@pytest.mark.asyncio
async def test_seed_prompt_uses_absolute_path(audio_file, monkeypatch):
    monkeypatch.chdir(audio_file.parent)
    coordinator = FakeAgent("Planner", responder=done("nothing to do"))

    result = await execute(audio_file.name, AgentSet(coordinator, []))

    assert coordinator.inputs == [f"process voice recording in file {os.path.abspath(audio_file.name)}"]
    assert result.audio_path == audio_file.name


@pytest.mark.asyncio
@pytest.mark.parametrize("k", [0, 1, 3])
async def test_action_log_has_two_k_plus_one_entries(audio_file, k):
    script = [delegate("Worker", f"GetCurrentDateTime step {i}") for i in range(k)] + [done("finished")]
    coordinator = FakeAgent("Planner", responder=script)
    worker = FakeAgent("Worker", ["GetCurrentDateTime()"], "LOCAL=...;UTC=...")

    result = await execute(str(audio_file), AgentSet(coordinator, [worker]), max_iterations=10)

    assert len(result.actions) == 2 * k + 1
    assert result.actions[-1].action == "Plan"
    assert result.summary == "finished"


@pytest.mark.asyncio
async def test_never_done_stops_at_iteration_ceiling(audio_file):
    coordinator = FakeAgent("Planner", responder=delegate("Worker", "GetCurrentDateTime"))
    worker = FakeAgent("Worker", ["GetCurrentDateTime()"], "now")

    result = await execute(str(audio_file), AgentSet(coordinator, [worker]), max_iterations=4)

    assert len(coordinator.inputs) == 4
    assert result.summary is None
    assert not result.completed


@pytest.mark.asyncio
async def test_non_json_coordinator_yields_only_plan_records(audio_file):
    coordinator = FakeAgent("Planner", responder="I think we should transcribe first.")
    worker = FakeAgent("Utility", ["TranscribeVoiceRecording(audioPath)"], "text")

    result = await execute(str(audio_file), AgentSet(coordinator, [worker]), max_iterations=8)

    assert len(result.actions) == 8
    assert all(a.agent == "Planner" and a.action == "Plan" for a in result.actions)
    assert result.summary is None
    assert worker.inputs == []


@pytest.mark.asyncio
async def test_malformed_reply_triggers_corrective_prompt(audio_file):
    coordinator = FakeAgent("Planner", responder=[
        "garbage",
        '{"Action":"DELEGATE","Agent":"Utility","Task":"  "}',
        done("ok"),
    ])

    result = await execute(str(audio_file), AgentSet(coordinator, [FakeAgent("Utility")]))

    assert coordinator.inputs[1] == prompts.CORRECTIVE_INSTRUCTION
    assert coordinator.inputs[2] == prompts.CORRECTIVE_INSTRUCTION
    assert [a.raw_result for a in result.actions][:2] == ["garbage", '{"Action":"DELEGATE","Agent":"Utility","Task":"  "}']
    assert len(result.actions) == 3


@pytest.mark.asyncio
async def test_unknown_agent_is_recorded_and_loop_continues(audio_file):
    coordinator = FakeAgent("Planner", responder=[
        delegate("Calendar", "SetReminder(call mum, 2025-10-10)"),
        done("gave up on calendar"),
    ])

    result = await execute(str(audio_file), AgentSet(coordinator, [FakeAgent("OfficeAutomation")]))

    worker_record = result.actions[1]
    assert worker_record.agent == "Calendar"
    assert worker_record.action == "SetReminder"
    assert worker_record.raw_result == f"{UNKNOWN_AGENT_PREFIX}Calendar"
    assert result.summary == "gave up on calendar"

    context = json.loads(coordinator.inputs[1])
    assert context["Actions"][1]["RawResult"].startswith("UNKNOWN_AGENT:")


@pytest.mark.asyncio
async def test_worker_lookup_ignores_case(audio_file):
    coordinator = FakeAgent("Planner", responder=[delegate("officeautomation", "SendEmail(hi, body)"), done("sent")])
    office = FakeAgent("OfficeAutomation", ["SendEmail(subject, body)"], "Email sent")

    result = await execute(str(audio_file), AgentSet(coordinator, [office]))

    assert office.inputs == ["SendEmail(hi, body)"]
    assert result.actions[1].agent == "OfficeAutomation"


@pytest.mark.asyncio
async def test_context_blob_carries_transcript_and_history(audio_file):
    coordinator = FakeAgent("Planner", responder=[delegate("Utility", "TranscribeVoiceRecording(x)"), done("ok")])
    envelope = json.dumps({"ok": True, "type": "Transcription", "data": {"text": "buy milk tomorrow"}})
    utility = FakeAgent("Utility", ["TranscribeVoiceRecording(audioPath)"], envelope)

    await execute(str(audio_file), AgentSet(coordinator, [utility]))

    context = json.loads(coordinator.inputs[1])
    assert context["Transcript"] == "buy milk tomorrow"
    assert [a["Agent"] for a in context["Actions"]] == ["Planner", "Utility"]
    assert context["Actions"][1]["RawResult"] == envelope
    assert context["Guidance"] == prompts.GUIDANCE
    assert context["RequiredResponse"]["Action"] == "DELEGATE|DONE"


@pytest.mark.asyncio
async def test_transcript_is_captured_once(audio_file):
    coordinator = FakeAgent("Planner", responder=[
        delegate("Utility", "Transcribe the recording"),
        delegate("Utility", "Transcribe it again"),
        done("ok"),
    ])
    utility = FakeAgent("Utility", ["TranscribeVoiceRecording(audioPath)"], ["first text", "second text"])

    result = await execute(str(audio_file), AgentSet(coordinator, [utility]))

    assert result.transcription == "first text"


@pytest.mark.asyncio
async def test_repeated_delegation_adds_guidance(audio_file):
    coordinator = FakeAgent("Planner", responder=delegate("Utility", "GetCurrentDateTime()"))
    utility = FakeAgent("Utility", ["GetCurrentDateTime()"], "now")

    await execute(str(audio_file), AgentSet(coordinator, [utility]), max_iterations=4)

    guidance = [json.loads(p)["Guidance"] for p in coordinator.inputs[1:]]
    assert prompts.REPETITION_GUIDANCE not in guidance[0]
    assert prompts.REPETITION_GUIDANCE not in guidance[1]
    assert prompts.REPETITION_GUIDANCE in guidance[2]


@pytest.mark.asyncio
async def test_worker_failure_propagates(audio_file):
    coordinator = FakeAgent("Planner", responder=delegate("Utility", "Transcribe"))

    with pytest.raises(RuntimeError, match="backend down"):
        await execute(str(audio_file), AgentSet(coordinator, [FailingAgent("Utility")]))


@pytest.mark.asyncio
async def test_cancellation_before_start_returns_empty_result(audio_file):
    cancel = asyncio.Event()
    cancel.set()
    coordinator = FakeAgent("Planner", responder=done("never"))

    result = await execute(str(audio_file), AgentSet(coordinator, []), cancel=cancel)

    assert coordinator.inputs == []
    assert result.actions == ()
    assert result.summary is None


@pytest.mark.asyncio
async def test_cancellation_mid_run_keeps_partial_log(audio_file):
    cancel = asyncio.Event()

    def worker_reply(task):
        cancel.set()
        return "now"

    coordinator = FakeAgent("Planner", responder=[delegate("Utility", "GetCurrentDateTime"), done("too late")])
    utility = FakeAgent("Utility", ["GetCurrentDateTime()"], worker_reply)

    result = await execute(str(audio_file), AgentSet(coordinator, [utility]), cancel=cancel)

    assert len(coordinator.inputs) == 1
    assert [a.agent for a in result.actions] == ["Planner", "Utility"]
    assert result.summary is None


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["", "   "])
async def test_blank_audio_path_fails_fast(path):
    coordinator = FakeAgent("Planner", responder=done("x"))

    with pytest.raises(ValueError):
        await execute(path, AgentSet(coordinator, []))
    assert coordinator.inputs == []


@pytest.mark.asyncio
async def test_missing_audio_file_fails_fast(tmp_path):
    coordinator = FakeAgent("Planner", responder=done("x"))

    with pytest.raises(FileNotFoundError):
        await execute(str(tmp_path / "missing.mp3"), AgentSet(coordinator, []))
    assert coordinator.inputs == []


@pytest.mark.asyncio
async def test_agent_set_can_serve_concurrent_runs(tmp_path):
    first = tmp_path / "a.mp3"
    second = tmp_path / "b.mp3"
    first.write_bytes(b"a")
    second.write_bytes(b"b")

    def plan(prompt):
        if prompt.startswith("process voice recording"):
            return delegate("Utility", f"Transcribe {prompt.rsplit(' ', 1)[-1]}")
        return done(json.loads(prompt)["Transcript"])

    class SlowUtility(FakeAgent):
        async def run(self, text):
            await asyncio.sleep(0)
            return os.path.basename(text.split(" ", 1)[1])

    agents = AgentSet(FakeAgent("Planner", responder=plan), [SlowUtility("Utility", ["TranscribeVoiceRecording(audioPath)"])])

    r1, r2 = await asyncio.gather(execute(str(first), agents), execute(str(second), agents))

    assert r1.summary == "a.mp3" and r2.summary == "b.mp3"
    assert len(r1.actions) == len(r2.actions) == 3


@pytest.mark.asyncio
async def test_deeply_nested_reply_is_reprompted(audio_file):
    coordinator = FakeAgent("Planner", responder=["[" * 200000, done("ok")])

    result = await execute(str(audio_file), AgentSet(coordinator, []))

    assert coordinator.inputs[1] == prompts.CORRECTIVE_INSTRUCTION
    assert result.summary == "ok"
    assert len(result.actions) == 2
