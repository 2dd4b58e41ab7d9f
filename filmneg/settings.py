# Application settings

# --- Film base ---
# Typical orange-brown mask of C-41 film, used when nothing else is known
DEFAULT_FILM_BASE = (220, 150, 130)

# Border sampling: every n-th pixel along each edge, capped in total
BORDER_SAMPLE_STRIDE = 10
BORDER_SAMPLE_LIMIT = 50

# --- Conversion defaults ---
CONVERSION_DEFAULTS = {
    "base_subtraction_opacity": 0.8,
    "channel_adjustments": (1.0, 0.8, 0.7),   # r, g, b (1.0 = neutral)
    "contrast_boost": 1.1,                    # 1.0 = neutral
    "cyan_adjustment": (10.0, 0.8, 0.1),      # hue, saturation, lightness
}

# --- Cyan detection ---
CYAN_MAX_GB_DIFFERENCE = 50
CYAN_RATIO = 1.3
CYAN_MIN_CHANNEL = 100
CYAN_HUE_RANGE = (150.0, 210.0)   # exclusive

# --- Noise reduction ---
# Only images larger than this on both sides get smoothed
NOISE_REDUCTION_MIN_SIZE = 200
NOISE_REDUCTION_STRENGTH = 0.5

# --- Export ---
DEFAULT_JPEG_QUALITY = 95
DEFAULT_PNG_COMPRESSION = 6

# --- Input ---
RAW_EXTENSIONS = (".raf", ".dng", ".nef", ".arw", ".cr2", ".cr3", ".orf", ".rw2")

# --- Logging ---
LOGGING_LEVEL = "INFO"  # Options: DEBUG, INFO, WARNING, ERROR
LOGGING_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
