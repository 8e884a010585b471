"""
Tests for the pipeline tokenizer and process supervision.
"""

import sys

import pytest

from ops.process import PipelineSpawnError, PipelineSupervisor, split_args
from ops.signals import CancellationToken


def python_supervisor():
    return PipelineSupervisor(executable=sys.executable, base_args=("-c",))


class TestSplitArgs:
    def test_whitespace(self):
        assert split_args("videotestsrc ! fakesink") == ["videotestsrc", "!", "fakesink"]

    def test_collapses_repeated_spaces(self):
        assert split_args("  a   b  ") == ["a", "b"]

    def test_quoted_group(self):
        cmd = 'udpsrc port=5000 caps="application/x-rtp, media=video" ! rtph264depay'
        assert split_args(cmd) == [
            "udpsrc",
            "port=5000",
            "caps=application/x-rtp, media=video",
            "!",
            "rtph264depay",
        ]

    def test_no_shell_semantics(self):
        assert split_args("a|b $HOME 'x y'") == ["a|b", "$HOME", "'x", "y'"]

    def test_empty(self):
        assert split_args("") == []
        assert split_args('""') == []


class TestPipelineSupervisor:
    def test_build_argv_default(self):
        supervisor = PipelineSupervisor()
        assert supervisor.build_argv("videotestsrc ! fdsink fd=1") == [
            "gst-launch-1.0", "-e", "videotestsrc", "!", "fdsink", "fd=1",
        ]

    def test_streams_child_stdout(self):
        supervisor = python_supervisor()
        token = CancellationToken()
        with supervisor:
            process, stdout = supervisor.start('"import sys; sys.stdout.buffer.write(bytes(16))"', token)
            assert stdout.read() == bytes(16)

        assert supervisor.stdout is None
        assert process.returncode is not None

    def test_cancel_kills_child(self):
        supervisor = python_supervisor()
        token = CancellationToken()
        process, _ = supervisor.start('"import time; time.sleep(30)"', token)
        try:
            assert supervisor.is_running
            token.cancel()
            assert process.wait(timeout=10) is not None
        finally:
            supervisor.shutdown()
        assert not supervisor.is_running

    def test_shutdown_kills_running_child(self):
        supervisor = python_supervisor()
        process, _ = supervisor.start('"import time; time.sleep(30)"', CancellationToken())
        supervisor.shutdown()
        assert process.returncode is not None
        supervisor.shutdown()

    def test_spawn_failure(self, tmp_path):
        supervisor = PipelineSupervisor(executable=str(tmp_path / "missing-gst"))
        with pytest.raises(PipelineSpawnError):
            supervisor.start("videotestsrc ! fakesink", CancellationToken())
        supervisor.shutdown()

    def test_empty_command(self):
        with pytest.raises(PipelineSpawnError):
            python_supervisor().start("   ", CancellationToken())

    def test_start_twice(self):
        supervisor = python_supervisor()
        with supervisor:
            supervisor.start('"pass"', CancellationToken())
            with pytest.raises(PipelineSpawnError):
                supervisor.start('"pass"', CancellationToken())
