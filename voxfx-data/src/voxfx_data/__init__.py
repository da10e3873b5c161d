"""voxfx-data: feature extraction, audio file I/O and sample validation."""
