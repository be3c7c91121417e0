"""Shared constants for ChessLink. All game-wide configuration lives here."""

# --- Display ---
SQUARE_SIZE = 60  # pixels per board square
BOARD_SIZE_PX = SQUARE_SIZE * 8
STATUS_BAR_HEIGHT = 40
SCREEN_WIDTH = BOARD_SIZE_PX
SCREEN_HEIGHT = BOARD_SIZE_PX + STATUS_BAR_HEIGHT
FPS = 60

# --- Wire format ---
FRAME_SIZE = 128          # every message is exactly this many bytes
FIELD_DELIMITER = ":"
ROW_SEPARATOR = "/"
PADDING_CHAR = "0"
MOVE_TAG = "ChessMOVE"
QUIT_TAG = "ChessQUIT"
SIGNED_FIELD_COUNT = 4    # tag, move, outcome, board are compared on reconcile

# --- Networking ---
DEFAULT_PORT = 3000
DEFAULT_BIND = "0.0.0.0"
CONNECT_TIMEOUT_S = 10.0
RECV_CHUNK_SIZE = 4096
SEND_TIMEOUT_S = 5.0

# --- Colors ---
COLOR_BG = (200, 200, 200)
COLOR_LIGHT_SQUARE = (255, 182, 193)
COLOR_DARK_SQUARE = (255, 105, 180)
COLOR_SELECTED = (100, 126, 204)
COLOR_DESTINATION = (173, 216, 230)
COLOR_WHITE_PIECE = (245, 245, 240)
COLOR_BLACK_PIECE = (30, 30, 35)
COLOR_STATUS_BG = (40, 40, 48)
COLOR_STATUS_TEXT = (220, 220, 220)
COLOR_STATUS_ALERT = (220, 80, 60)
