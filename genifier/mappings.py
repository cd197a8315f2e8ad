GROUP_COLORS: dict[str, str] = {
    "event": "#f38ba8",
    "document": "#89b4fa",
    "entity": "#fab387",
    "chunk": "#45475a",
}

COLOR_FALLBACK = "#a6e3a1"

HOVER_NODE_COLOR = "#f9e2af"

# (highlighted, muted) pairs keyed by the connectivity of a link to the hovered node
LINK_COLORS: tuple[str, str] = ("#f9e2af", "#585b70")
LINK_WIDTHS: tuple[float, float] = (3.0, 1.5)
LINK_ARROW_LENGTHS: tuple[float, float] = (6.0, 3.0)

# Link labels: on-screen pixel sizes, divided by the zoom scale when drawn
LABEL_FONT_FAMILY = "Sans-Serif"
LABEL_FONT_SIZES: tuple[float, float] = (14.0, 10.0)
LABEL_FONT_WEIGHTS: tuple[str, str] = ("bold", "normal")
LABEL_PADDING = 2.0
LABEL_BACKGROUNDS: tuple[str, str] = ("#f9e2af", "rgba(17, 17, 27, 0.8)")
LABEL_FOREGROUNDS: tuple[str, str] = ("#11111b", "#a6adc8")

# Average glyph advance relative to the font size, used when no text metrics are available
APPROX_GLYPH_WIDTH = 0.6

SUMMARY_PLACEHOLDER = "No summary available."
CHUNK_TITLE_TEMPLATE = "Chunk #{n}"

CHAT_LOG_EXTENSIONS: list[str] = ["txt"]
