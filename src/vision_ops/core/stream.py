"""
Frame Stream Controller - sequential read, transform, write loop.

Drives one stream session through Opening -> Streaming -> Draining -> Closed
(or Failed). Frame N is written before frame N+1 is read. Both handles are
released on every exit path, sink first.
"""

import logging
import time
from collections.abc import Callable
from threading import Event

from ..errors import ProcessingError, VisionOpsError
from ..models import FrameSink, FrameSource, FrameTransform, StreamSession, StreamState
from ..utils.constants import (
    DEFAULT_FRAME_RATE,
    DEFAULT_VIDEO_CODEC,
    PROGRESS_REPORT_INTERVAL,
)
from .video_io import open_video_sink, open_video_source

logger = logging.getLogger(__name__)

SourceOpener = Callable[[str], FrameSource]
SinkOpener = Callable[..., FrameSink]


class FrameStreamController:
    """
    Runs a per-frame transform over a whole video stream.

    Example:
        controller = FrameStreamController(GrayscaleTransform())
        session = controller.run("in.avi", "out.avi")
        print(session.frame_index)
    """

    def __init__(
        self,
        transform: FrameTransform,
        open_source: SourceOpener | None = None,
        open_sink: SinkOpener | None = None,
        cancel_event: Event | None = None,
        progress_interval: int = PROGRESS_REPORT_INTERVAL,
        codec: str = DEFAULT_VIDEO_CODEC,
    ):
        """
        Args:
            transform: Per-frame transform, owned for the whole stream
            open_source: Opens the input path (default: video file)
            open_sink: Opens the output path (default: video file)
            cancel_event: Checked once per frame; when set, the stream drains
            progress_interval: Log progress every N frames
            codec: Four-character codec passed to the sink opener
        """
        self.transform = transform
        self._open_source = open_source
        self._open_sink = open_sink
        self._cancel_event = cancel_event
        self._progress_interval = progress_interval
        self._codec = codec
        self.state = StreamState.OPENING

    def run(self, source_path: str, sink_path: str) -> StreamSession:
        """
        Process every frame of source_path into sink_path.

        Args:
            source_path: Input video path
            sink_path: Output video path

        Returns:
            The finished session (frame_index = frames written)

        Raises:
            SourceUnavailable: Input could not be opened
            SinkUnavailable: Output could not be created
            ProcessingError: Reading, transforming or writing a frame failed
        """
        self.state = StreamState.OPENING
        source = None
        sink = None

        try:
            source = (self._open_source or open_video_source)(source_path)
            session = StreamSession(
                source=source,
                sink=None,
                width=source.width,
                height=source.height,
                frame_rate=_usable_frame_rate(source.frame_rate),
            )

            sink = (self._open_sink or open_video_sink)(
                sink_path,
                session.width,
                session.height,
                session.frame_rate,
                self.transform.output_channels == 3,
                codec=self._codec,
            )
            session.sink = sink

            logger.info(
                f"Processing {self.transform.name}: {session.width}x{session.height} "
                f"@ {session.frame_rate:g} fps"
            )

            self.state = StreamState.STREAMING
            self._stream(session)
            self.state = StreamState.DRAINING
            return session

        except Exception:
            self.state = StreamState.FAILED
            raise

        finally:
            if sink is not None:
                sink.release()
            if source is not None:
                source.release()
            if self.state is not StreamState.FAILED:
                self.state = StreamState.CLOSED

    def _stream(self, session: StreamSession) -> None:
        """Main frame loop."""
        start_time = time.time()

        while True:
            if self._cancel_event is not None and self._cancel_event.is_set():
                logger.info("Cancellation requested, draining stream")
                break

            frame = self._step(session.source.read, session, "read")
            if frame is None:
                break

            output = self._step(
                lambda: self.transform.apply(frame), session, "transform"
            )
            self._step(lambda: session.sink.write(output), session, "write")
            session.frame_index += 1

            if session.frame_index % self._progress_interval == 0:
                _log_progress(session.frame_index, start_time)

        _log_final_stats(session.frame_index, start_time)

    @staticmethod
    def _step(action: Callable, session: StreamSession, what: str):
        """Run one stage of the loop, tagging foreign errors with the frame."""
        try:
            return action()
        except VisionOpsError:
            raise
        except Exception as e:
            raise ProcessingError(
                f"Frame {session.frame_index}: {what} failed: {e}"
            ) from e


def _usable_frame_rate(frame_rate: float) -> float:
    """Some containers report 0 fps; writers reject that."""
    if frame_rate and frame_rate > 0:
        return frame_rate
    logger.warning(f"Source reports no frame rate, using {DEFAULT_FRAME_RATE:g} fps")
    return DEFAULT_FRAME_RATE


def _log_progress(frame_count: int, start_time: float) -> None:
    """Log periodic status."""
    elapsed = time.time() - start_time
    fps = frame_count / elapsed if elapsed > 0 else 0
    logger.info(f"Processed {frame_count} frames | {fps:.1f} frames/s")


def _log_final_stats(frame_count: int, start_time: float) -> None:
    """Log final statistics."""
    elapsed = time.time() - start_time
    logger.info(f"Finished processing {frame_count} frames in {elapsed:.1f}s")
