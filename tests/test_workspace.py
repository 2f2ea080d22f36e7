"""
Tests for the scratch workspace lifecycle.
"""

import logging

import pytest

from asl3_mapp.core.workspace import ScratchWorkspace


class TestScratchWorkspace:
    def test_acquire_creates_with_mode(self, tmp_path):
        ws = ScratchWorkspace(tmp_path / "a" / "scratch")
        path = ws.acquire()
        assert path.is_dir()
        assert (path.stat().st_mode & 0o777) == 0o755
        assert ws.created_by_us

    def test_existing_directory_not_created_by_us(self, tmp_path):
        (tmp_path / "scratch").mkdir()
        ws = ScratchWorkspace(tmp_path / "scratch")
        ws.acquire()
        assert not ws.created_by_us

    def test_release_removes_recursively(self, tmp_path):
        ws = ScratchWorkspace(tmp_path / "scratch")
        ws.acquire()
        (ws.path / "nested" / "deep").mkdir(parents=True)
        (ws.path / "nested" / "deep" / "f.txt").write_text("x")
        ws.release()
        assert not ws.exists

    def test_release_twice_is_safe(self, tmp_path):
        ws = ScratchWorkspace(tmp_path / "scratch")
        ws.acquire()
        ws.release()
        ws.release()
        assert not ws.exists

    def test_context_manager_releases_on_error(self, tmp_path):
        ws = ScratchWorkspace(tmp_path / "scratch")
        with pytest.raises(RuntimeError):
            with ws:
                assert ws.exists
                raise RuntimeError("step blew up")
        assert not ws.exists

    def test_context_manager_releases_on_interrupt(self, tmp_path):
        ws = ScratchWorkspace(tmp_path / "scratch")
        with pytest.raises(KeyboardInterrupt):
            with ws:
                raise KeyboardInterrupt
        assert not ws.exists

    def test_reusing_existing_directory_warns(self, tmp_path, caplog):
        (tmp_path / "scratch").mkdir()
        ws = ScratchWorkspace(tmp_path / "scratch")
        with caplog.at_level(logging.WARNING):
            ws.acquire()
        assert "already exists" in caplog.text
        ws.release()
        assert not ws.exists

    def test_release_without_directory(self, tmp_path):
        ws = ScratchWorkspace(tmp_path / "never-created")
        ws.release()
        assert not ws.exists
