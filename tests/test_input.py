"""Regression tests for raw-key decoding.

Covers ESC timing, the alternate encodings of navigation keys, and the
literal-byte variant used for control keys such as Ctrl-Q.
"""

import os
import time
import unittest
from unittest import mock

from ji import input as input_mod
from ji.input import Key, KeyEvent, ctrl_key, decode_bytes, read_key
from ji.terminal import TerminalError


def _read_from_pipe(payload: bytes, count: int = 1, timeout_ms: int = 20) -> list[KeyEvent]:
    read_fd, write_fd = os.pipe()
    try:
        os.write(write_fd, payload)
        return [read_key(read_fd, timeout_ms=timeout_ms) for _ in range(count)]
    finally:
        os.close(read_fd)
        os.close(write_fd)


class ReadKeyTests(unittest.TestCase):
    def test_arrow_up_sequence_is_recognized(self) -> None:
        self.assertEqual(_read_from_pipe(b"\x1b[A"), [KeyEvent(Key.ARROW_UP)])

    def test_delete_sequence_is_recognized(self) -> None:
        self.assertEqual(_read_from_pipe(b"\x1b[3~"), [KeyEvent(Key.DELETE)])

    def test_page_up_sequence_is_recognized(self) -> None:
        self.assertEqual(_read_from_pipe(b"\x1b[5~"), [KeyEvent(Key.PAGE_UP)])

    def test_single_escape_returns_escape_without_second_keypress(self) -> None:
        started = time.monotonic()
        events = _read_from_pipe(b"\x1b")
        elapsed = time.monotonic() - started

        self.assertEqual(events, [KeyEvent(Key.ESCAPE)])
        self.assertLess(elapsed, 0.5)

    def test_ctrl_q_is_a_literal_byte(self) -> None:
        (event,) = _read_from_pipe(b"\x11")

        self.assertEqual(event, KeyEvent(Key.CHAR, 0x11))
        self.assertEqual(event, KeyEvent.char(ctrl_key("q")))
        self.assertNotEqual(event, KeyEvent.char(ctrl_key("w")))

    def test_printable_byte_is_a_literal_byte(self) -> None:
        self.assertEqual(_read_from_pipe(b"a"), [KeyEvent.char(ord("a"))])

    def test_consecutive_keys_decode_in_order(self) -> None:
        events = _read_from_pipe(b"\x1b[Bx\x1b[D", count=3)

        self.assertEqual(
            events,
            [KeyEvent(Key.ARROW_DOWN), KeyEvent.char(ord("x")), KeyEvent(Key.ARROW_LEFT)],
        )

    def test_incomplete_sequence_drops_consumed_bytes(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            os.write(write_fd, b"\x1b[")
            first = read_key(read_fd, timeout_ms=20)
            os.write(write_fd, b"z")
            second = read_key(read_fd, timeout_ms=20)
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(first, KeyEvent(Key.ESCAPE))
        self.assertEqual(second, KeyEvent.char(ord("z")))

    def test_read_key_retries_until_a_byte_arrives(self) -> None:
        with mock.patch("ji.input.read_byte", side_effect=[None, None, b"k"]) as read_mock:
            event = read_key(0, timeout_ms=1)

        self.assertEqual(event, KeyEvent.char(ord("k")))
        self.assertEqual(read_mock.call_count, 3)


class ReadByteTests(unittest.TestCase):
    def test_timeout_returns_none(self) -> None:
        read_fd, write_fd = os.pipe()
        try:
            self.assertIsNone(input_mod.read_byte(read_fd, timeout_ms=10))
        finally:
            os.close(read_fd)
            os.close(write_fd)

    def test_end_of_input_is_reported_like_a_timeout(self) -> None:
        read_fd, write_fd = os.pipe()
        os.close(write_fd)
        try:
            self.assertIsNone(input_mod.read_byte(read_fd, timeout_ms=10))
        finally:
            os.close(read_fd)

    def test_read_failure_raises_terminal_error(self) -> None:
        with mock.patch("ji.input.select.select", return_value=([0], [], [])), mock.patch(
            "ji.input.os.read", side_effect=OSError(5, "Input/output error")
        ):
            with self.assertRaises(TerminalError) as ctx:
                input_mod.read_byte(0, timeout_ms=10)

        self.assertEqual(str(ctx.exception), "read: Input/output error")

    def test_eagain_is_treated_as_no_byte(self) -> None:
        with mock.patch("ji.input.select.select", return_value=([0], [], [])), mock.patch(
            "ji.input.os.read", side_effect=BlockingIOError(11, "Resource temporarily unavailable")
        ):
            self.assertIsNone(input_mod.read_byte(0, timeout_ms=10))


class DecodeBytesTests(unittest.TestCase):
    def test_tilde_sequences_map_to_navigation_keys(self) -> None:
        cases = {
            b"\x1b[1~": Key.HOME,
            b"\x1b[7~": Key.HOME,
            b"\x1b[4~": Key.END,
            b"\x1b[8~": Key.END,
            b"\x1b[3~": Key.DELETE,
            b"\x1b[5~": Key.PAGE_UP,
            b"\x1b[6~": Key.PAGE_DOWN,
        }
        for payload, key in cases.items():
            with self.subTest(payload=payload):
                self.assertEqual(decode_bytes(payload), [KeyEvent(key)])

    def test_csi_letters_map_to_arrows_home_and_end(self) -> None:
        cases = {
            b"\x1b[A": Key.ARROW_UP,
            b"\x1b[B": Key.ARROW_DOWN,
            b"\x1b[C": Key.ARROW_RIGHT,
            b"\x1b[D": Key.ARROW_LEFT,
            b"\x1b[H": Key.HOME,
            b"\x1b[F": Key.END,
        }
        for payload, key in cases.items():
            with self.subTest(payload=payload):
                self.assertEqual(decode_bytes(payload), [KeyEvent(key)])

    def test_ss3_home_and_end_are_recognized(self) -> None:
        self.assertEqual(decode_bytes(b"\x1bOH\x1bOF"), [KeyEvent(Key.HOME), KeyEvent(Key.END)])

    def test_unrecognized_sequences_degrade_to_escape(self) -> None:
        for payload in (b"\x1b[2~", b"\x1b[9~", b"\x1b[3x", b"\x1b[Z", b"\x1bOA", b"\x1bxy"):
            with self.subTest(payload=payload):
                self.assertEqual(decode_bytes(payload), [KeyEvent(Key.ESCAPE)])

    def test_trailing_lone_escape_is_escape(self) -> None:
        self.assertEqual(decode_bytes(b"q\x1b"), [KeyEvent.char(ord("q")), KeyEvent(Key.ESCAPE)])

    def test_ctrl_key_masks_to_low_five_bits(self) -> None:
        self.assertEqual(ctrl_key("q"), 0x11)
        self.assertEqual(ctrl_key("Q"), 0x11)
        self.assertEqual(ctrl_key("a"), 0x01)

    def test_named_rejects_char_without_byte(self) -> None:
        with self.assertRaises(ValueError):
            KeyEvent.named(Key.CHAR)


if __name__ == "__main__":
    unittest.main()
