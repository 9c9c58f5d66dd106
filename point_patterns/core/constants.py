"""Constants shared across point_patterns layers."""

# Compression modes accepted by DiscoveryConfig
COMPRESSION_MODES = ("exact", "fast")

# Compactness measures accepted by the compactness filter
COMPACTNESS_MEASURES = ("region", "span")

# Patterns smaller than this are never candidates for compression
MIN_PATTERN_SIZE = 2

# A TEC must compress better than listing its points one by one
DEFAULT_MIN_COMPRESSION_RATIO = 1.0

# Default coordinate columns read from delimited tables (onset, pitch)
DEFAULT_COLUMNS = (0, 1)

# Point features that can be extracted from MIDI notes
MIDI_FEATURES = ("onset", "pitch", "duration", "velocity", "voice")

# Dimension holding pitch in onset/pitch point sets
PITCH_DIMENSION = 1

# TEC algorithms used to generate compression candidates
TEC_ALGORITHMS = ("siatec", "siatec-ch")
