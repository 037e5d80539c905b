# Tree-sitter is fed utf-8, so node byte offsets are utf-8 byte offsets
ENC = "utf-8"

FUNDAMENTAL_MODE = "fundamental-mode"

OPEN_BRACKETS = "([{"
CLOSE_BRACKETS = ")]}"
