"""Stage modules wrapping ffmpeg, Gemini and the filesystem."""
