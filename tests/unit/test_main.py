"""
Unit tests for the Celery subprocess helpers in main.
"""
import os
import platform
import stat
import subprocess
import sys

import pytest
from unittest.mock import MagicMock, patch

from api_logger import main


@pytest.mark.unit
class TestStartCeleryProcess:

    def test_output_is_not_piped(self):
        with patch.object(main.subprocess, "Popen", return_value=MagicMock(pid=1234)) as popen:
            process = main._start_celery_process(["beat", "-l", "info"], "Beat")

        assert process.pid == 1234
        kwargs = popen.call_args.kwargs
        assert kwargs.get("stdout") is not subprocess.PIPE
        assert kwargs.get("stderr") is not subprocess.PIPE
        assert kwargs["cwd"] == main._PROJECT_DIR

    def test_command_targets_celery_app(self):
        with patch.object(main.subprocess, "Popen", return_value=MagicMock(pid=1)) as popen:
            main._start_celery_process(["worker"], "worker")

        cmd = popen.call_args.args[0]
        assert cmd[1:5] == ["-m", "celery", "-A", "api_logger.celery_app"]
        assert cmd[-1] == "worker"

    def test_popen_failure_returns_none(self):
        with patch.object(main.subprocess, "Popen", side_effect=OSError("no such file")):
            assert main._start_celery_process(["worker"], "worker") is None

    @pytest.mark.skipif(platform.system() == "Windows", reason="uses a POSIX shell script")
    def test_chatty_child_runs_to_completion(self, tmp_path):
        marker = tmp_path / "done"
        script = tmp_path / "chatty"
        # ~400 KB of log output, well past a pipe buffer
        script.write_text(
            "#!/bin/sh\n"
            "i=0\n"
            "while [ $i -lt 4000 ]; do\n"
            "  echo '[2024-01-01 12:00:00,000: INFO/ForkPoolWorker-1] attempt logged "
            "partition_key=20240101 row_key=00000000-0000-0000-0000-000000000000' >&2\n"
            "  i=$((i+1))\n"
            "done\n"
            f"touch '{marker}'\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR)

        with patch.object(sys, "executable", str(script)), \
                patch.object(main, "_PROJECT_DIR", str(tmp_path)):
            process = main._start_celery_process(["worker"], "worker")

        assert process is not None
        assert process.wait(timeout=30) == 0
        assert os.path.exists(marker)
