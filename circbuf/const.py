"""Constants for the circular buffer."""

DEFAULT_CAPACITY = 4 * 1024 * 1024  # (4mb)
DEFAULT_OFFSET = 0

# log the first wraparound and every Nth one after that
DEFAULT_WRAP_LOG_INTERVAL = 1000

CONFIG_ENCODING = "utf-8"

ENV_CAPACITY = "CIRCBUF_CAPACITY"
ENV_OFFSET = "CIRCBUF_OFFSET"
ENV_RESET_READ_CURSOR = "CIRCBUF_RESET_READ_CURSOR"
ENV_WRAP_LOG_INTERVAL = "CIRCBUF_WRAP_LOG_INTERVAL"
