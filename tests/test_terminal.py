"""Tests for pi.repl.terminal.ProcessTerminal.

termios calls are replaced with recorders; byte I/O goes through pipes.
"""

from __future__ import annotations

import os
import termios

import pytest

from pi.repl.terminal import ProcessTerminal, _raw_attributes

ALL_BITS = 0xFFFFFFFF


def fake_attrs() -> list:
    return [ALL_BITS, 0x5, 0xBF, ALL_BITS, 38400, 38400, [b"\x00"] * 32]


@pytest.fixture
def recorded_termios(monkeypatch: pytest.MonkeyPatch) -> list[tuple]:
    calls: list[tuple] = []
    monkeypatch.setattr(termios, "tcgetattr", lambda fd: fake_attrs())
    monkeypatch.setattr(
        termios, "tcsetattr", lambda fd, when, attrs: calls.append((fd, when, attrs))
    )
    return calls


class TestRawAttributes:
    def test_clears_echo_canonical_and_signals(self) -> None:
        attrs = _raw_attributes(fake_attrs(), keep_signals=False)
        lflag = attrs[3]
        assert not lflag & termios.ECHO
        assert not lflag & termios.ICANON
        assert not lflag & termios.ISIG

    def test_cbreak_keeps_signals(self) -> None:
        attrs = _raw_attributes(fake_attrs(), keep_signals=True)
        assert attrs[3] & termios.ISIG
        assert not attrs[3] & termios.ICANON

    def test_clears_input_translation(self) -> None:
        iflag = _raw_attributes(fake_attrs(), keep_signals=False)[0]
        for bit in (termios.ICRNL, termios.INLCR, termios.IGNCR, termios.ISTRIP, termios.IXON, termios.IXOFF):
            assert not iflag & bit

    def test_leaves_output_processing_alone(self) -> None:
        original = fake_attrs()
        attrs = _raw_attributes(original, keep_signals=False)
        assert attrs[1] == original[1]
        assert attrs[2] == original[2]

    def test_reads_one_byte_at_a_time(self) -> None:
        cc = _raw_attributes(fake_attrs(), keep_signals=False)[6]
        assert cc[termios.VMIN] == 1
        assert cc[termios.VTIME] == 0

    def test_does_not_mutate_input(self) -> None:
        original = fake_attrs()
        _raw_attributes(original, keep_signals=False)
        assert original == fake_attrs()


class TestRawMode:
    def test_acquires_and_restores_once(self, recorded_termios: list[tuple]) -> None:
        term = ProcessTerminal(fd_in=5, fd_out=6)
        with term.raw_mode():
            assert term.active
            assert len(recorded_termios) == 1
            fd, when, attrs = recorded_termios[0]
            assert fd == 5
            assert when == termios.TCSADRAIN
            assert not attrs[3] & termios.ICANON
        assert not term.active
        assert len(recorded_termios) == 2
        assert recorded_termios[1][2] == fake_attrs()

    def test_restores_on_error(self, recorded_termios: list[tuple]) -> None:
        term = ProcessTerminal(fd_in=5, fd_out=6)
        with pytest.raises(ValueError):
            with term.raw_mode():
                raise ValueError("inside")
        assert len(recorded_termios) == 2
        assert recorded_termios[1][2] == fake_attrs()

    def test_acquisition_failure_changes_nothing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def not_a_tty(fd: int) -> list:
            raise termios.error(25, "Inappropriate ioctl for device")

        calls: list[tuple] = []
        monkeypatch.setattr(termios, "tcgetattr", not_a_tty)
        monkeypatch.setattr(termios, "tcsetattr", lambda *args: calls.append(args))
        term = ProcessTerminal(fd_in=5, fd_out=6)
        with pytest.raises(termios.error):
            with term.raw_mode():
                pass
        assert calls == []
        assert not term.active

    def test_nested_use_rejected(self, recorded_termios: list[tuple]) -> None:
        term = ProcessTerminal(fd_in=5, fd_out=6)
        with term.raw_mode():
            with pytest.raises(RuntimeError):
                with term.raw_mode():
                    pass
        assert len(recorded_termios) == 2


class TestByteIO:
    def test_read_byte_one_at_a_time_then_eof(self) -> None:
        r, w = os.pipe()
        try:
            os.write(w, b"ab")
            os.close(w)
            w = -1
            term = ProcessTerminal(fd_in=r, fd_out=1)
            assert term.read_byte() == ord("a")
            assert term.read_byte() == ord("b")
            with pytest.raises(EOFError):
                term.read_byte()
        finally:
            os.close(r)
            if w != -1:
                os.close(w)

    def test_write_sends_all_bytes(self) -> None:
        r, w = os.pipe()
        try:
            term = ProcessTerminal(fd_in=0, fd_out=w)
            term.write(b"\r> hello\x1b[1D")
            assert os.read(r, 64) == b"\r> hello\x1b[1D"
        finally:
            os.close(r)
            os.close(w)
