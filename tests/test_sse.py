import json

import pytest

from sse import DeltaDecoder, extract_delta, iter_deltas


def frame(content):
    return ("data: " + json.dumps({"choices": [{"delta": {"content": content}}]}, ensure_ascii=False) + "\n\n").encode("utf-8")


STREAM = (
    b": keep-alive comment\n"
    + frame("Halo ")
    + b"event: message\n"
    + frame("kak 👋, ")
    + b"\n"
    + frame("siap bantu!")
    + b"data: [DONE]\n\n"
)


def test_hello_scenario():
    chunks = [frame("He"), frame("llo")]
    assert "".join(iter_deltas(chunks)) == "Hello"


@pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 16, 64])
def test_same_text_regardless_of_chunk_boundaries(size):
    whole = "".join(iter_deltas([STREAM]))
    chunks = [STREAM[i:i + size] for i in range(0, len(STREAM), size)]
    assert "".join(iter_deltas(chunks)) == whole == "Halo kak 👋, siap bantu!"


def test_multibyte_character_split_across_reads():
    data = frame("👋")
    emoji_start = data.index("👋".encode("utf-8"))
    chunks = [data[:emoji_start + 1], data[emoji_start + 1:emoji_start + 3], data[emoji_start + 3:]]
    assert list(iter_deltas(chunks)) == ["👋"]


@pytest.mark.parametrize(
    "line",
    [
        "",
        "   ",
        ": comment",
        "event: message",
        "id: 42",
        'data:{"choices":[{"delta":{"content":"no space"}}]}',
        "data: [DONE]",
        'data: {"choices":[{"delta":{}}]}',
        'data: {"choices":[]}',
        'data: {"choices":[{"delta":{"content":""}}]}',
        "data: {not json",
    ],
)
def test_lines_without_text(line):
    assert extract_delta(line) is None


def test_surrounding_whitespace_is_trimmed():
    assert extract_delta('  data:   {"choices":[{"delta":{"content":"x"}}]}  \r') == "x"


def test_done_does_not_stop_reading():
    chunks = [frame("before"), b"data: [DONE]\n\n", frame(" after")]
    assert "".join(iter_deltas(chunks)) == "before after"


def test_json_split_across_lines_is_dropped():
    chunks = [b'data: {"choices":[{"delta":\n', b'{"content":"lost"}}]}\n', frame("kept")]
    assert list(iter_deltas(chunks)) == ["kept"]


def test_partial_line_waits_for_newline():
    decoder = DeltaDecoder()
    data = frame("wait")
    assert decoder.feed(data[:10]) == []
    assert decoder.pending == data[:10].decode()
    assert decoder.feed(data[10:]) == ["wait"]
    assert decoder.pending == ""


def test_unterminated_final_line_is_not_parsed():
    tail = b'data: {"choices":[{"delta":{"content":"tail"}}]}'
    assert list(iter_deltas([frame("body"), tail])) == ["body"]
