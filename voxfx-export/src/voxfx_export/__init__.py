"""voxfx-export: custom voice model payloads, model files and registries."""
