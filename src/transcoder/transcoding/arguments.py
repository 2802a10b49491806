"""Fluent construction of FFmpeg command-line arguments."""

import math


class FFmpegArgumentBuilder:
    """Collects FFmpeg options keyed by name; setting an option again replaces it."""

    def __init__(self):
        self.args: dict[str, list[str]] = {}

    def _set(self, key: str, *values) -> "FFmpegArgumentBuilder":
        self.args[key] = [str(v) for v in values]
        return self

    def compile_arguments(self) -> list[str]:
        """Flatten the options in the order they were first set."""
        compiled = []
        for values in self.args.values():
            compiled.extend(values)
        return compiled

    # --- Video ---

    def video_codec(self, codec: str) -> "FFmpegArgumentBuilder":
        return self._set("vcodec", "-vcodec", codec)

    def video_bitrate(self, bitrate) -> "FFmpegArgumentBuilder":
        return self._set("b", "-b:v", bitrate)

    def fps(self, fps) -> "FFmpegArgumentBuilder":
        return self._set("r", "-r", fps)

    def format(self, fmt: str) -> "FFmpegArgumentBuilder":
        """Set the output container; MP4 output is made fragmented and streamable."""
        self._set("format", "-f", fmt)
        if fmt.lower() == "mp4":
            self._set("movflags", "-movflags", "frag_keyframe+faststart")
        return self

    def max_size(self, width: int, height: int, always_scale: bool = True) -> "FFmpegArgumentBuilder":
        """Fit the video inside width x height, keeping its aspect ratio.

        With ``always_scale=False`` videos that already fit are left at their size.
        """
        flt_width = f"min(trunc({width}/hsub)*hsub\\,trunc(a*{height}/hsub)*hsub)"
        flt_height = f"min(trunc({height}/vsub)*vsub\\,trunc({width}/a/vsub)*vsub)"
        if not always_scale:
            flt_width = f"min(trunc(iw/hsub)*hsub\\,{flt_width})"
            flt_height = f"min(trunc(ih/vsub)*vsub\\,{flt_height})"
        return self._set("vfscale", "-vf", f"scale={flt_width}:{flt_height}")

    def min_size(self, width: int, height: int, always_scale: bool = True) -> "FFmpegArgumentBuilder":
        """Grow the video to cover width x height, keeping its aspect ratio.

        With ``always_scale=False`` videos that are already larger are left at their size.
        """
        flt_width = f"max(trunc({width}/hsub)*hsub\\,trunc(a*{height}/hsub)*hsub)"
        flt_height = f"max(trunc({height}/vsub)*vsub\\,trunc({width}/a/vsub)*vsub)"
        if not always_scale:
            flt_width = f"max(trunc(iw/hsub)*hsub\\,{flt_width})"
            flt_height = f"max(trunc(ih/vsub)*vsub\\,{flt_height})"
        return self._set("vfscale", "-vf", f"scale={flt_width}:{flt_height}")

    def size(self, width: int, height: int) -> "FFmpegArgumentBuilder":
        """Set an exact frame size; the aspect ratio is not preserved."""
        return self._set("s", "-s", f"{width}x{height}")

    def passes(self, passes: int) -> "FFmpegArgumentBuilder":
        return self._set("pass", "-pass", passes)

    def aspect_ratio(self, ratio) -> "FFmpegArgumentBuilder":
        return self._set("aspect", "-aspect", ratio)

    # --- Audio ---

    def audio_codec(self, codec: str) -> "FFmpegArgumentBuilder":
        return self._set("acodec", "-acodec", codec)

    def sample_rate(self, sample_rate: int) -> "FFmpegArgumentBuilder":
        return self._set("ar", "-ar", sample_rate)

    def channels(self, channels: int) -> "FFmpegArgumentBuilder":
        return self._set("ac", "-ac", channels)

    def audio_bitrate(self, bitrate) -> "FFmpegArgumentBuilder":
        return self._set("ab", "-ab", bitrate)

    # --- Misc ---

    def custom(self, key: str, value=None) -> "FFmpegArgumentBuilder":
        """Set an arbitrary ``-key [value]`` option."""
        if value is None:
            return self._set(key, f"-{key}")
        return self._set(key, f"-{key}", value)

    def capture_frame(self, time_ms: float) -> "FFmpegArgumentBuilder":
        """Export a single JPEG frame taken at ``time_ms``."""
        self._set("ss", "-ss", format_timestamp(time_ms), "-an", "-r", "1", "-vframes", "1", "-y")
        return self.video_codec("mjpeg").format("mjpeg")


def format_timestamp(time_ms: float) -> str:
    """Format milliseconds as ``H:M:S``, rounding seconds up."""
    secs = time_ms / 1000
    hours = math.floor(secs / 3600)
    remainder = secs % 3600
    minutes = math.floor(remainder / 60)
    seconds = math.ceil(remainder % 60)

    while seconds >= 60:
        seconds -= 60
        minutes += 1
    while minutes >= 60:
        minutes -= 60
        hours += 1

    return f"{hours}:{minutes}:{seconds}"
