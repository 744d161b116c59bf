"""Per-video pipelines and the task types they operate on."""
