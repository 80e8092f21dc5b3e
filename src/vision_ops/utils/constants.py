"""
Constants used throughout vision operations
"""

# Stream progress and output
PROGRESS_REPORT_INTERVAL = 100  # Log progress every N frames
DEFAULT_FRAME_RATE = 30.0  # Used when the source reports no frame rate
DEFAULT_VIDEO_CODEC = "MJPG"  # FourCC for output video

# Object detection defaults (Darknet YOLO)
DEFAULT_CONFIDENCE_THRESHOLD = 0.5
DEFAULT_NMS_THRESHOLD = 0.4
DEFAULT_NETWORK_INPUT_SIZE = 416
BOX_FIELD_COUNT = 5  # center_x, center_y, width, height, objectness

# Annotation style (BGR)
BOX_COLOR = (0, 255, 0)
LABEL_TEXT_COLOR = (0, 0, 0)
BOX_THICKNESS = 2
LABEL_FONT_SCALE = 0.5
LABEL_FONT_THICKNESS = 1

# Configuration
CONFIG_FILE_NAME = "vision_ops.yaml"
USER_CONFIG_DIR = "vision-ops"

# Environment variables
ENV_LOG_LEVEL = "VISION_OPS_LOG_LEVEL"
ENV_VIDEO_CODEC = "VISION_OPS_VIDEO_CODEC"
