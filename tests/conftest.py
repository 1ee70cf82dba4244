import os
import stat

import pytest

from TUNoverTCP.dispatcher import Dispatcher


@pytest.fixture
def tunnel_workdir(tmp_path, monkeypatch):
    """
    a working directory laid out like a built tunnel engine checkout, without the binary itself.
    """
    binary = tmp_path / Dispatcher.TUNNEL_BINARY
    binary.parent.mkdir(parents=True)
    monkeypatch.chdir(tmp_path)
    return binary


@pytest.fixture
def recording_engine(tunnel_workdir):
    """
    a stand-in tunnel engine that records its arguments and RUST_LOG, then exits with status 3.
    """
    record = tunnel_workdir.parent / 'invocation.txt'
    tunnel_workdir.write_text(
        '#!/bin/sh\n'
        f'echo "$RUST_LOG" "$@" > {record}\n'
        'exit 3\n'
    )
    tunnel_workdir.chmod(tunnel_workdir.stat().st_mode | stat.S_IXUSR)
    return record


@pytest.fixture
def exec_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(os, 'execve', lambda path, argv, env: calls.append((path, argv, env)))
    return calls
