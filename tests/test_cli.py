"""
Tests for the command-line interface.
"""

import io
import os
import signal
import tempfile
import unittest
from contextlib import nullcontext, redirect_stderr, redirect_stdout
from unittest.mock import patch

import cv2
import numpy as np

from vision_ops import cli
from vision_ops.errors import ConfigurationError


class TestParseArgs(unittest.TestCase):
    """Test argument parsing and request building."""

    def test_only_given_params_are_forwarded(self):
        """Test unset flags stay out of the request so defaults apply later."""
        args = cli.parse_args(["--op", "dilate", "-i", "in.png", "-o", "out.png"])

        request = cli.build_request(args)

        self.assertEqual(request.operation, "dilate")
        self.assertEqual(request.inputs, ["in.png"])
        self.assertEqual(request.params, {})

    def test_short_flags(self):
        """Test short flags map to parameter names."""
        args = cli.parse_args(
            ["--op", "resize", "-i", "in.png", "-o", "out.png", "-f", "0.5", "-k", "5", "-b", "20"]
        )

        self.assertEqual(
            cli.build_request(args).params, {"factor": 0.5, "kernel_size": 5, "value": 20}
        )

    def test_multiple_inputs(self):
        """Test -i takes several paths and can repeat."""
        args = cli.parse_args(["--op", "stitch", "-i", "a.jpg", "b.jpg", "-i", "c.jpg", "-o", "p.jpg"])

        self.assertEqual(args.inputs, ["a.jpg", "b.jpg", "c.jpg"])

    def test_detector_flags(self):
        """Test detector options, including the two-value min size."""
        args = cli.parse_args(
            [
                "--op", "detect-faces", "-i", "a.jpg", "-o", "b.jpg",
                "-c", "faces.xml", "--min_size", "20", "40", "--min_neighbors", "5",
            ]
        )

        self.assertEqual(
            cli.build_request(args).params,
            {"cascade": "faces.xml", "min_size": (20, 40), "min_neighbors": 5},
        )

    def test_no_shadows(self):
        """Test --no_shadows turns shadow detection off."""
        args = cli.parse_args(["--op", "bg-subtract", "-i", "a.mp4", "-o", "b.avi", "--no_shadows"])

        self.assertEqual(cli.build_request(args).params, {"detect_shadows": False})

    def test_bad_flag_value(self):
        """Test argument errors raise instead of exiting with code 2."""
        with self.assertRaises(ConfigurationError):
            cli.parse_args(["--op", "dilate", "-k", "three"])


class TestMain(unittest.TestCase):
    """Test exit codes of the main entry point."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.config = self.path("vision_ops.yaml")
        with open(self.config, "w", encoding="utf-8") as f:
            f.write("log_level: WARNING\n")
        self.image = self.path("in.png")
        cv2.imwrite(self.image, np.zeros((20, 30, 3), dtype=np.uint8))

    def path(self, name):
        return os.path.join(self.temp_dir.name, name)

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = cli.main(["--config", self.config, *argv])
        return code, stdout.getvalue(), stderr.getvalue()

    def test_help_exits_zero(self):
        """Test --help exits successfully."""
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit) as ctx:
            cli.parse_args(["--help"])

        self.assertEqual(ctx.exception.code, 0)

    def test_success(self):
        """Test a valid operation writes its output and returns 0."""
        out = self.path("out.png")

        code, stdout, _ = self.run_main("--op", "dilate", "-i", self.image, "-o", out, "-k", "5")

        self.assertEqual(code, 0)
        self.assertTrue(os.path.isfile(out))
        self.assertIn("DILATE COMPLETE", stdout)

    def test_quiet_suppresses_summary(self):
        """Test -q prints no summary."""
        code, stdout, _ = self.run_main(
            "-q", "--op", "erode", "-i", self.image, "-o", self.path("e.png")
        )

        self.assertEqual(code, 0)
        self.assertEqual(stdout, "")

    def test_missing_required_param(self):
        """Test resize without a factor returns 1 and writes nothing."""
        out = self.path("out.png")

        code, _, _ = self.run_main("--op", "resize", "-i", self.image, "-o", out)

        self.assertEqual(code, 1)
        self.assertFalse(os.path.exists(out))

    def test_unknown_operation(self):
        """Test an unknown operation returns 1."""
        code, _, _ = self.run_main("--op", "sharpen", "-i", self.image, "-o", self.path("x.png"))

        self.assertEqual(code, 1)

    def test_unknown_flag(self):
        """Test an unrecognised flag returns 1."""
        code, _, stderr = self.run_main("--op", "dilate", "--sharpness", "3")

        self.assertEqual(code, 1)
        self.assertIn("Argument Error", stderr)

    def test_missing_input_file(self):
        """Test an unreadable input returns 1."""
        code, _, _ = self.run_main(
            "--op", "dilate", "-i", self.path("missing.png"), "-o", self.path("out.png")
        )

        self.assertEqual(code, 1)

    def test_operation_required(self):
        """Test running without --op returns 1."""
        code, _, _ = self.run_main("-i", self.image, "-o", self.path("out.png"))

        self.assertEqual(code, 1)

    def test_missing_config_file(self):
        """Test an explicit config path that does not exist returns 1."""
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            code = cli.main(["--config", self.path("nope.yaml"), "--list"])

        self.assertEqual(code, 1)

    def test_list(self):
        """Test --list shows every operation."""
        code, stdout, _ = self.run_main("--list")

        self.assertEqual(code, 0)
        for name in ("dilate", "stitch", "bg-subtract", "detect-objects"):
            self.assertIn(name, stdout)

    def test_validate(self):
        """Test --validate shows the plan without writing output."""
        out = self.path("half.png")

        code, stdout, _ = self.run_main(
            "--validate", "--op", "resize", "-i", self.image, "-o", out, "-f", "0.5"
        )

        self.assertEqual(code, 0)
        self.assertIn("Request is valid", stdout)
        self.assertIn("interpolation: linear", stdout)
        self.assertFalse(os.path.exists(out))


class TestShutdownSignal(unittest.TestCase):
    """Test graceful shutdown handling."""

    def tearDown(self):
        cli._shutdown_signal.clear()

    def test_handler_sets_event(self):
        """Test SIGTERM sets the shutdown event."""
        with redirect_stdout(io.StringIO()):
            cli._handle_shutdown_signal(signal.SIGTERM, None)

        self.assertTrue(cli._shutdown_signal.is_set())

    def test_handlers_restored(self):
        """Test previous handlers come back after the operation."""
        before = signal.getsignal(signal.SIGINT)

        with cli._signal_handlers():
            self.assertIs(signal.getsignal(signal.SIGINT), cli._handle_shutdown_signal)

        self.assertIs(signal.getsignal(signal.SIGINT), before)


class TestSignalScope(unittest.TestCase):
    """Test that only streaming operations react to shutdown signals."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.temp_dir.cleanup)
        self.config = os.path.join(self.temp_dir.name, "vision_ops.yaml")
        with open(self.config, "w", encoding="utf-8") as f:
            f.write("log_level: WARNING\n")
        self.addCleanup(cli._shutdown_signal.clear)
        self.cancel_events = []

    def fake_dispatch(self, request, settings, cancel_event=None):
        """Record the cancel event and simulate a signal arriving mid-run."""
        self.cancel_events.append(cancel_event)
        cli._shutdown_signal.set()
        return {"frames": 3}

    def run_main(self, *argv):
        with patch("vision_ops.cli.dispatch", side_effect=self.fake_dispatch), patch(
            "vision_ops.cli._signal_handlers", return_value=nullcontext()
        ) as handlers, redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            code = cli.main(["--config", self.config, "-q", *argv])
        return code, handlers

    def test_streaming_operation_installs_handlers(self):
        """Test video operations get the shutdown event and warn on early stop."""
        with self.assertLogs("vision_ops.cli", level="WARNING") as logs:
            code, handlers = self.run_main("--op", "video-gray", "-i", "in.avi", "-o", "out.avi")

        self.assertEqual(code, 0)
        handlers.assert_called_once()
        self.assertIs(self.cancel_events[0], cli._shutdown_signal)
        self.assertIn("output is partial", logs.output[0])

    def test_single_image_operation_ignores_signals(self):
        """Test stitch runs without handlers and never reports partial output."""
        with self.assertNoLogs("vision_ops.cli", level="WARNING"):
            code, handlers = self.run_main(
                "--op", "stitch", "-i", "a.jpg", "b.jpg", "-o", "pano.jpg"
            )

        self.assertEqual(code, 0)
        handlers.assert_not_called()
        self.assertIsNone(self.cancel_events[0])


if __name__ == "__main__":
    unittest.main()
