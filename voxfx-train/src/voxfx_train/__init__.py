"""voxfx-train: feature conversion, synthesis, the advanced effect pipeline and training."""
