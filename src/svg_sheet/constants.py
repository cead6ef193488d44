"""Application-wide constants for svg-sheet.

Constants are grouped into the following categories:
- Sprite Constants: fixed markup of the combined output document
- Markup Constants: tokens recognised by the root element scanner
- Default Constants: defaults for the build and watch configuration
- Logging Constants: defaults for log output
"""

APP_VERSION = "0.3.0"

# Sprite constants
SVG_NAMESPACE = "http://www.w3.org/2000/svg"
SPRITE_HEADER = f'<svg xmlns="{SVG_NAMESPACE}"><defs>'
SPRITE_FOOTER = "</defs></svg>"
PATTERN_CLOSE = "</pattern>"
SVG_GLOB = "*.svg"
DATA_ID_ATTRIBUTE = "data-id"  # Root ids are relocated to this attribute

# Markup constants
BYTE_ORDER_MARK = "\ufeff"
ROOT_OPEN_TOKEN = "<svg"
ROOT_CLOSE_TOKEN = "</svg"
PROCESSING_INSTRUCTION_OPEN = "<?"
PROCESSING_INSTRUCTION_CLOSE = "?>"
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
DOCTYPE_OPEN = "<!DOCTYPE"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
VIEWBOX_TOKEN_COUNT = 4  # min-x, min-y, width, height

# Default constants
DEFAULT_INPUT_DIRECTORY = "svgs"
DEFAULT_OUTPUT_FILE = "sprite.svg"
DEFAULT_DEBOUNCE_MS = 300  # Quiet period before a watch rebuild starts
DEFAULT_POLL_INTERVAL_MS = 500  # Directory snapshot interval in watch mode
MIN_DEBOUNCE_MS = 1  # A zero debounce is treated as this value
MILLISECONDS_PER_SECOND = 1000
TEMP_FILE_PREFIX = ".svg-sheet-"  # Temporary output files live next to the output
TEMP_FILE_SUFFIX = ".tmp"  # Never matches the input glob

# Logging constants
BYTES_PER_MEGABYTE = 1024 * 1024
DEFAULT_LOG_LEVEL = "WARNING"
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["json", "text"]
