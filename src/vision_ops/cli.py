"""
Vision Ops CLI
Main entry point for running one image or video operation.

Supports:
  --validate  Check a request and show the resolved parameters
  --list      Show available operations
"""

import argparse
import logging
import signal
import sys
from contextlib import contextmanager, nullcontext
from threading import Event as ThreadEvent

from . import __version__
from .config import load_config, print_operations, print_plan
from .dispatcher import OperationRequest, build_plan, dispatch
from .errors import ConfigurationError, VisionOpsError
from .operations import get_operation, load_operations

logger = logging.getLogger(__name__)

# Module-level shutdown signal for SIGTERM/SIGINT handling
_shutdown_signal = ThreadEvent()

# Parameter flags forwarded to the operation (only when given on the command line)
PARAM_DESTS = (
    "kernel_size",
    "factor",
    "interpolation",
    "value",
    "threshold1",
    "threshold2",
    "history",
    "var_threshold",
    "detect_shadows",
    "cascade",
    "scale_factor",
    "min_neighbors",
    "min_size",
    "yolo_cfg",
    "yolo_weights",
    "yolo_names",
    "conf",
    "nms",
    "input_width",
    "input_height",
    "report",
    "mask",
    "radius",
    "inpaint_method",
)


class _ArgumentParser(argparse.ArgumentParser):
    """Report argument errors as ConfigurationError (exit 1, not argparse's 2)."""

    def error(self, message):
        raise ConfigurationError(message)


def _handle_shutdown_signal(signum, _frame):
    """
    Handle SIGTERM/SIGINT for graceful shutdown.

    Streaming operations check the event once per frame and drain,
    so the output video is closed properly.
    """
    signal_name = "SIGTERM" if signum == signal.SIGTERM else "SIGINT"
    # Note: print is safer than logger in signal handlers
    print(f"\nReceived {signal_name}, stopping after current frame...")
    _shutdown_signal.set()


@contextmanager
def _signal_handlers():
    """Install shutdown handlers for the duration of one operation."""
    previous = {
        sig: signal.signal(sig, _handle_shutdown_signal)
        for sig in (signal.SIGTERM, signal.SIGINT)
    }
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def setup_logging(level: str = "INFO", quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        level: Log level name from config
        quiet: If True, only show warnings and errors
    """
    log_level = logging.WARNING if quiet else getattr(logging, level, logging.INFO)

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("vision_ops.", "vo.")
            return super().format(record)

    # Replace a handler from a previous call instead of stacking another
    for existing in list(logging.root.handlers):
        if getattr(existing, "_vision_ops", False):
            logging.root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler._vision_ops = True
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(log_level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = _ArgumentParser(
        prog="vision-ops",
        description="Vision Ops - image filters, detectors, stitching and video processing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  vision-ops --op dilate -i in.png -o out.png -k 5
  vision-ops --op resize -i in.png -o half.png -f 0.5
  vision-ops --op stitch -i left.jpg right.jpg -o pano.jpg
  vision-ops --op bg-subtract -i traffic.mp4 -o mask.avi --history 300
  vision-ops --op detect-objects -i street.jpg -o boxes.jpg \\
      --yolo_cfg yolov3.cfg --yolo_weights yolov3.weights --yolo_names coco.names

Environment Variables:
  VISION_OPS_LOG_LEVEL   - Override log level from config
  VISION_OPS_VIDEO_CODEC - Override output video codec (FourCC)
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--op",
        "--operation",
        dest="operation",
        help="Operation to perform (see --list)",
    )
    parser.add_argument(
        "-i",
        "--input",
        dest="inputs",
        nargs="+",
        action="extend",
        default=[],
        help="Input image/video path(s). Multiple allowed for stitch.",
    )
    parser.add_argument("-o", "--output", default="", help="Output image/video path")
    parser.add_argument(
        "--config", default=None, help="Path to config file (default: search standard locations)"
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate the request and show resolved parameters without running",
    )
    parser.add_argument(
        "--list", action="store_true", help="List available operations"
    )

    # Operation parameters: absent unless given, so config/schema defaults apply
    core = parser.add_argument_group("core operation options")
    core.add_argument("-k", "--kernel_size", type=int, default=argparse.SUPPRESS,
                      help="Kernel size for dilate/erode (positive odd, default 3)")
    core.add_argument("-f", "--factor", type=float, default=argparse.SUPPRESS,
                      help="Resize factor (e.g. 1.5 for 150%%)")
    core.add_argument("--interpolation", default=argparse.SUPPRESS,
                      choices=["nearest", "linear", "cubic", "area", "lanczos"],
                      help="Resize interpolation (default linear)")
    core.add_argument("-b", "--brightness", dest="value", type=int, default=argparse.SUPPRESS,
                      help="Value added to every channel (default 0)")
    core.add_argument("--t1", "--threshold1", dest="threshold1", type=float,
                      default=argparse.SUPPRESS, help="Canny lower threshold (default 100)")
    core.add_argument("--t2", "--threshold2", dest="threshold2", type=float,
                      default=argparse.SUPPRESS, help="Canny upper threshold (default 200)")

    video = parser.add_argument_group("video options")
    video.add_argument("--history", type=int, default=argparse.SUPPRESS,
                       help="bg-subtract history length (default 500)")
    video.add_argument("--var_threshold", type=float, default=argparse.SUPPRESS,
                       help="bg-subtract variance threshold (default 16)")
    video.add_argument("--no_shadows", dest="detect_shadows", action="store_false",
                       default=argparse.SUPPRESS, help="bg-subtract without shadow detection")

    detect = parser.add_argument_group("detector options")
    detect.add_argument("-c", "--cascade", default=argparse.SUPPRESS,
                        help="Haar cascade XML (detect-faces)")
    detect.add_argument("--scale_factor", type=float, default=argparse.SUPPRESS,
                        help="detect-faces pyramid scale (default 1.1)")
    detect.add_argument("--min_neighbors", type=int, default=argparse.SUPPRESS,
                        help="detect-faces min neighbours (default 3)")
    detect.add_argument("--min_size", type=int, nargs=2, metavar=("W", "H"),
                        default=argparse.SUPPRESS, help="detect-faces min face size (default 30 30)")
    detect.add_argument("--yolo_cfg", default=argparse.SUPPRESS, help="YOLO .cfg file (detect-objects)")
    detect.add_argument("--yolo_weights", default=argparse.SUPPRESS,
                        help="YOLO .weights file (detect-objects)")
    detect.add_argument("--yolo_names", default=argparse.SUPPRESS,
                        help="YOLO .names file (detect-objects)")
    detect.add_argument("--conf", type=float, default=argparse.SUPPRESS,
                        help="Confidence threshold in (0, 1] (default 0.5)")
    detect.add_argument("--nms", type=float, default=argparse.SUPPRESS,
                        help="NMS overlap threshold in (0, 1] (default 0.4)")
    detect.add_argument("--input_width", type=int, default=argparse.SUPPRESS,
                        help="Network input width (default 416)")
    detect.add_argument("--input_height", type=int, default=argparse.SUPPRESS,
                        help="Network input height (default 416)")
    detect.add_argument("--report", default=argparse.SUPPRESS,
                        help="Write detections as JSON (detect-objects)")

    inpaint = parser.add_argument_group("inpaint options")
    inpaint.add_argument("-m", "--mask", default=argparse.SUPPRESS, help="Mask image path")
    inpaint.add_argument("--radius", type=float, default=argparse.SUPPRESS,
                         help="Inpainting radius (default 3.0)")
    inpaint.add_argument("--inpaint_method", default=argparse.SUPPRESS,
                         help="NS or TELEA (default NS)")

    return parser.parse_args(argv)


def build_request(args: argparse.Namespace) -> OperationRequest:
    """Turn parsed arguments into an OperationRequest."""
    params = {dest: getattr(args, dest) for dest in PARAM_DESTS if hasattr(args, dest)}
    if "min_size" in params:
        params["min_size"] = tuple(params["min_size"])

    return OperationRequest(
        operation=args.operation,
        inputs=list(args.inputs),
        output=args.output,
        params=params,
    )


def print_summary(operation: str, output: str, summary: dict) -> None:
    """Print final status and output location."""
    print(f"\n{'=' * 60}")
    print(f"{operation.upper()} COMPLETE")
    print("=" * 60)
    for key, value in summary.items():
        print(f"  {key}: {value}")
    print(f"\nOutput: {output}")
    print(f"{'=' * 60}\n")


def main(argv: list[str] | None = None) -> int:
    """
    Main orchestrator function.

    Returns:
        Process exit code: 0 on success, 1 on any failure
    """
    _shutdown_signal.clear()

    try:
        args = parse_args(argv)
    except ConfigurationError as e:
        print(f"Argument Error: {e}", file=sys.stderr)
        return 1

    try:
        settings = load_config(args.config)
    except VisionOpsError as e:
        setup_logging(quiet=args.quiet)
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    setup_logging(settings.log_level, quiet=args.quiet or args.validate)

    if args.list:
        print_operations(load_operations())
        return 0

    if not args.operation:
        logger.error("Operation (--operation or --op) is required (see --list)")
        return 1

    request = build_request(args)

    try:
        if args.validate:
            print_plan(build_plan(request, settings))
            return 0

        # Only frame loops can stop early; other operations run to completion
        streaming = get_operation(request.operation).streaming
        with _signal_handlers() if streaming else nullcontext():
            summary = dispatch(
                request,
                settings,
                cancel_event=_shutdown_signal if streaming else None,
            )

    except VisionOpsError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error in {request.operation}: {e}", exc_info=True)
        return 1

    if streaming and _shutdown_signal.is_set():
        logger.warning("Stopped early by signal - output is partial")

    if not args.quiet:
        print_summary(request.operation, request.output, summary)
    return 0


if __name__ == "__main__":
    sys.exit(main())
