"""Hypothesis strategies for property-based testing."""

from hypothesis import strategies as st


@st.composite
def generate_timestamp(draw):
    """Generate an FFmpeg ``HH:MM:SS.cc`` timestamp with its value in milliseconds."""
    hours = draw(st.integers(min_value=0, max_value=99))
    minutes = draw(st.integers(min_value=0, max_value=59))
    seconds = draw(st.integers(min_value=0, max_value=59))
    centis = draw(st.integers(min_value=0, max_value=99))
    text = f"{hours:02d}:{minutes:02d}:{seconds:02d}.{centis:02d}"
    millis = hours * 3_600_000 + minutes * 60_000 + seconds * 1000 + centis * 10
    return text, millis


@st.composite
def generate_stream_line(draw, file_index: int = 0, stream_index: int = 0):
    """Generate a ``Stream #`` line and the stream type it declares."""
    kind = draw(st.sampled_from(["video", "audio"]))
    prefix = f"    Stream #{file_index}:{stream_index}"
    if kind == "video":
        width = draw(st.integers(min_value=16, max_value=7680))
        height = draw(st.integers(min_value=16, max_value=4320))
        fps = draw(st.integers(min_value=1, max_value=120))
        return f"{prefix}: Video: h264, yuv420p, {width}x{height}, {fps} fps", kind
    rate = draw(st.sampled_from([8000, 22050, 44100, 48000, 96000]))
    layout = draw(st.sampled_from(["mono", "stereo", "5.1"]))
    return f"{prefix}: Audio: aac, {rate} Hz, {layout}, fltp", kind


@st.composite
def generate_section(draw, header: str, file_index: int = 0):
    """Generate a section header followed by its stream lines."""
    n_streams = draw(st.integers(min_value=0, max_value=6))
    lines = [header]
    kinds = []
    for i in range(n_streams):
        line, kind = draw(generate_stream_line(file_index, i))
        lines.append(line)
        kinds.append(kind)
    return lines, kinds


@st.composite
def generate_metadata_transcript(draw):
    """Generate the metadata phase of a run: input, output, then ``Stream mapping:``."""
    timestamp, duration = draw(generate_timestamp())
    input_lines, input_kinds = draw(generate_section("Input #0, mp4, from 'in.mp4':"))
    input_lines.insert(1, f"  Duration: {timestamp}, start: 0.000000, bitrate: 500 kb/s")
    output_lines, output_kinds = draw(generate_section("Output #0, mp4, to 'out.mp4':"))
    return {
        "lines": input_lines + output_lines + ["Stream mapping:"],
        "duration": duration,
        "input_kinds": input_kinds,
        "output_kinds": output_kinds,
    }


def generate_triggers():
    """Generate a non-empty sequence of phase-closing events."""
    return st.lists(st.sampled_from(["mapping", "progress", "exit"]), min_size=1, max_size=8)
