from ..exceptions import InvalidArgumentError


def read_file(input_path, mode='r', encoding=None):
    with open(input_path, mode, encoding=encoding) as f:
        return f.read()


def read_lines(input_path, line_start, line_end, encoding=None):
    """Read the lines ``[line_start, line_end)`` of a text file, each prefixed with its 1-based
    line number.

    The range is clamped to the lines present in the file, so the result never holds more entries
    than the file has lines. Lines are split on ``'\\n'`` only; a ``'\\r'`` stays part of the line
    text. Bytes that are invalid in ``encoding`` are replaced with U+FFFD.

        >>> read_lines('test.js', 2, 4)  # doctest: +SKIP
        ['3|  * A comment.', '4|  */']
    """
    data = read_file(input_path, mode='rb')
    lines = data.decode(encoding or 'utf8', errors='replace').split('\n')
    line_start = max(line_start, 0)
    line_end = min(line_end, len(lines))
    return [f'{i + 1}| {lines[i]}' for i in range(line_start, line_end)]


def to_bytes(data, encoding):
    if isinstance(data, str):
        return data.encode(encoding)
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise InvalidArgumentError(f"'data' is not 'str' or bytes-like: {type(data).__name__}")
